import logging
import os
from pathlib import Path

from src.core.errors import PatcherError


class CpioFile:
    """
    In-memory view of a ramdisk archive: entry name -> file content.
    Binary cpio encoding is left to magiskboot (see src.core.bootimg), this
    class only deals with the extracted entries.
    """

    def __init__(self, entries: dict = None):
        self.logger = logging.getLogger("Cpio")
        self._entries = {}
        self._modified = set()
        for name, data in (entries or {}).items():
            self.add_file(name, data)

    def exists(self, name: str) -> bool:
        return name in self._entries

    def contents(self, name: str) -> bytes:
        """Return entry content, or empty bytes if the entry does not exist"""
        return self._entries.get(name, b"")

    def set_contents(self, name: str, data: bytes):
        if name not in self._entries:
            raise PatcherError.entry_not_found(name)
        if self._entries[name] == data:
            return
        self._entries[name] = bytes(data)
        self._modified.add(name)
        self.logger.debug(f"Updated {name} ({len(data)} bytes)")

    def add_file(self, name: str, data: bytes):
        self._entries[name] = bytes(data)

    def filenames(self) -> list[str]:
        return sorted(self._entries)

    def modified(self) -> list[str]:
        """Entries rewritten through set_contents()"""
        return sorted(self._modified)

    @classmethod
    def from_directory(cls, ramdisk_dir: str | Path) -> "CpioFile":
        """Load every regular file of an extracted ramdisk tree"""
        ramdisk_dir = Path(ramdisk_dir)
        if not ramdisk_dir.is_dir():
            raise FileNotFoundError(f"Ramdisk directory not found: {ramdisk_dir}")

        cpio = cls()
        for path in sorted(ramdisk_dir.rglob("*")):
            if path.is_symlink() or not path.is_file():
                continue
            name = path.relative_to(ramdisk_dir).as_posix()
            cpio.add_file(name, path.read_bytes())

        cpio.logger.info(f"Loaded {len(cpio._entries)} entries from {ramdisk_dir}")
        return cpio

    def write_to_directory(self, out_dir: str | Path, only_modified: bool = False):
        out_dir = Path(out_dir)
        names = self.modified() if only_modified else self.filenames()

        for name in names:
            target = out_dir / name
            target.parent.mkdir(parents=True, exist_ok=True)
            # Preserve mode bits of files we are replacing (init scripts are 0750)
            mode = target.stat().st_mode if target.exists() else None
            target.write_bytes(self._entries[name])
            if mode is not None:
                os.chmod(target, mode)

        self.logger.info(f"Wrote {len(names)} entries to {out_dir}")
