from src.utils.lines import join_lines, split_lines
from .base import BaseRamdiskPatcher

FILE_CONTEXTS = "file_contexts"


class CoreRamdiskPatcher(BaseRamdiskPatcher):
    """Device independent fixes applied to every ramdisk"""

    Id = "core"

    def _patch(self):
        self.fix_data_media_context()

    def fix_data_media_context(self):
        """
        Some ROMs omit the /data/media line from /file_contexts. With a strict
        SELinux policy, restorecon then leaves /data/media/* with the context
        inherited from /data.
        """
        # Older ramdisks have no file_contexts at all
        if not self.cpio.exists(FILE_CONTEXTS):
            self.logger.debug(f"{FILE_CONTEXTS} not found, skipping /data/media context fix.")
            return

        lines = split_lines(self.cpio.contents(FILE_CONTEXTS))

        if any(line.startswith("/data/media") for line in lines):
            self.logger.debug("/data/media context already present.")
            return

        lines.append(self.pc.data_media_context)
        self.cpio.set_contents(FILE_CONTEXTS, join_lines(lines))
        self.logger.info(f"Added /data/media context to {FILE_CONTEXTS}")
