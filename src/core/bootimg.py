import logging
import shutil
import stat
from pathlib import Path

from src.core.cpio import CpioFile
from src.utils.shell import ShellRunner


class BootImage:
    """
    Unpacks a boot image with magiskboot into:
        work_dir/ramdisk.cpio   (raw archive, kept for repacking)
        work_dir/ramdisk/       (extracted entries)
    """

    def __init__(self, path: str | Path, work_dir: str | Path, shell: ShellRunner = None):
        self.path = Path(path).resolve()
        self.work_dir = Path(work_dir).resolve()
        self.ramdisk_cpio = self.work_dir / "ramdisk.cpio"
        self.ramdisk_dir = self.work_dir / "ramdisk"
        self.logger = logging.getLogger("BootImage")
        self.shell = shell or ShellRunner()

    def unpack(self) -> CpioFile:
        if not self.path.exists():
            raise FileNotFoundError(f"Boot image not found: {self.path}")

        self.logger.info(f"Unpacking {self.path.name}...")
        self.work_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(self.path, self.work_dir / "boot.img")

        self.shell.run(["magiskboot", "unpack", "boot.img"], cwd=self.work_dir)
        if not self.ramdisk_cpio.exists():
            raise FileNotFoundError(f"No ramdisk found in {self.path.name}")

        self.ramdisk_dir.mkdir(exist_ok=True)
        self.shell.run(["magiskboot", "cpio", str(self.ramdisk_cpio), "extract"], cwd=self.ramdisk_dir)

        return CpioFile.from_directory(self.ramdisk_dir)

    def repack(self, cpio: CpioFile, out_path: str | Path):
        """Put the rewritten entries back into ramdisk.cpio and rebuild the image"""
        out_path = Path(out_path).resolve()

        cpio.write_to_directory(self.ramdisk_dir, only_modified=True)
        for name in cpio.modified():
            entry_path = self.ramdisk_dir / name
            # Keep the mode the entry had when it was extracted
            mode = stat.S_IMODE(entry_path.stat().st_mode)
            self.logger.debug(f"Replacing {name} ({mode:04o}) in ramdisk.cpio")
            self.shell.run(
                ["magiskboot", "cpio", str(self.ramdisk_cpio), f"add {mode:04o} {name} {entry_path}"],
                cwd=self.work_dir,
            )

        self.shell.run(["magiskboot", "repack", "boot.img", str(out_path)], cwd=self.work_dir)
        self.logger.info(f"Boot image written to {out_path}")
