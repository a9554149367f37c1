import re

from src.core.errors import PatcherError
from src.utils.lines import join_lines, remove_matching, split_lines
from .base import BaseRamdiskPatcher

INIT_TARGET_RC = "init.target.rc"

# <optional comment> <device> <mount point> <fs type> <mount flags> <fs_mgr flags>
FSTAB_REGEX = re.compile(r"^(#.+)?(/dev/\S+)\s+(\S+)\s+(\S+)\s+(\S+)\s+(\S+)")
CACHE_MOUNT_REGEX = re.compile(r"^\s*mount\s.*\s/cache(\s|$)")


class QcomRamdiskPatcher(BaseRamdiskPatcher):
    """
    Fixes for Qualcomm based devices. The multiboot fstab generator takes
    over mounting /cache, so the init scripts must stop doing it by hand and
    read the generated fstab instead.
    """

    Id = "qcom"

    def __init__(self, pc, cpio, skip_paths=None, script: str = INIT_TARGET_RC):
        super().__init__(pc, cpio)
        self.skip_paths = list(skip_paths or [])
        self.script = script

    def _patch(self):
        self.add_missing_cache_in_fstab(self.skip_paths)
        self.strip_manual_cache_mounts(self.script)
        self.use_generated_fstab(self.script)

    def _fstab_entries(self, extra_fstabs):
        fstabs = [name for name in self.cpio.filenames() if name.startswith("fstab.")]
        for name in extra_fstabs or []:
            if not self.cpio.exists(name):
                raise PatcherError.entry_not_found(name)
            if name not in fstabs:
                fstabs.append(name)
        return fstabs

    def add_missing_cache_in_fstab(self, skip_paths, fstabs=None):
        """
        Append a /cache line to fstabs that lack one.

        :param skip_paths: Devices whose presence (on an active line) means the
                           fstab is handled elsewhere and must be left alone
        :param fstabs: Extra fstab entries to process besides fstab.*
        """
        skip_paths = set(skip_paths or [])

        for fstab in self._fstab_entries(fstabs):
            lines = split_lines(self.cpio.contents(fstab))

            has_cache = False
            skipped = False
            for line in lines:
                match = FSTAB_REGEX.search(line)
                if not match or match.group(1):
                    continue
                if match.group(2) in skip_paths:
                    skipped = True
                if match.group(3) == "/cache":
                    has_cache = True

            if skipped:
                self.logger.debug(f"Skipping {fstab}: contains a skipped device")
                continue
            if has_cache:
                continue

            lines.append(self.pc.cache_fstab_line)
            self.cpio.set_contents(fstab, join_lines(lines))
            self.logger.info(f"Added missing /cache entry to {fstab}")

    def strip_manual_cache_mounts(self, filename: str):
        if not self.cpio.exists(filename):
            raise PatcherError.entry_not_found(filename)

        lines = split_lines(self.cpio.contents(filename))
        new_lines = remove_matching(lines, CACHE_MOUNT_REGEX)

        if len(new_lines) != len(lines):
            self.cpio.set_contents(filename, join_lines(new_lines))
            self.logger.info(f"Removed {len(lines) - len(new_lines)} manual /cache mount(s) from {filename}")

    def use_generated_fstab(self, filename: str):
        if not self.cpio.exists(filename):
            raise PatcherError.entry_not_found(filename)

        pattern = re.compile(r"^(\s*mount_all\s+)\S*" + re.escape(self.pc.static_fstab) + r"(?=\s|$)")
        generated = self.pc.generated_fstab

        lines = split_lines(self.cpio.contents(filename))
        new_lines = [pattern.sub(lambda m: m.group(1) + generated, line) for line in lines]

        if new_lines != lines:
            self.cpio.set_contents(filename, join_lines(new_lines))
            self.logger.info(f"{filename} now mounts {generated}")
