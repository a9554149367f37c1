import re
from enum import Enum

from src.core.errors import PatcherError
from src.utils.lines import join_lines, split_lines, substitute_lines
from .base import BaseRamdiskPatcher

MSM8960_LPM_RC = "MSM8960_lpm.rc"
# Samsung 4.4 (KitKat) jflte ramdisks, TouchWiz and Google Edition, keep the
# charger-mode section in lpm.rc instead of MSM8960_lpm.rc
LPM_RC = "lpm.rc"


class SkinVariant(Enum):
    JELLY_BEAN = "jb43"  # Legacy: ships MSM8960_lpm.rc
    KITKAT = "kk44"      # Current: low power mode moved to lpm.rc

    @classmethod
    def detect(cls, cpio) -> "SkinVariant":
        if cpio.exists(MSM8960_LPM_RC):
            return cls.JELLY_BEAN
        return cls.KITKAT


COMMENT_CACHE_MOUNT = (r"^(\s+mount.*/cache.*)$", r"#\1")

# Low power mode script and the (pattern, replacement) rules applied to it
SKIN_RULES = {
    SkinVariant.JELLY_BEAN: (
        MSM8960_LPM_RC,
        (
            COMMENT_CACHE_MOUNT,
            (r"^(\s+mount_all\s+)\S*{static_fstab}\s*$", r"\g<1>{generated_fstab}"),
        ),
    ),
    SkinVariant.KITKAT: (
        LPM_RC,
        (
            COMMENT_CACHE_MOUNT,
            (r"^(\s+wait\s+\S*/by-name/cache\s*)$", r"#\1"),
        ),
    ),
}


class GalaxyRamdiskPatcher(BaseRamdiskPatcher):
    """Fixes for Samsung TouchWiz and Google Edition ramdisks"""

    Id = "galaxy"

    def __init__(self, pc, cpio, variant: SkinVariant):
        super().__init__(pc, cpio)
        self.variant = variant

    def _patch(self):
        self.modify_lpm_rc()

    def modify_lpm_rc(self):
        filename, rules = SKIN_RULES[self.variant]

        if not self.cpio.exists(filename):
            raise PatcherError.entry_not_found(filename)

        # Fill in the fstab names the same way QcomRamdiskPatcher uses them
        static_fstab = re.escape(self.pc.static_fstab)
        generated_fstab = self.pc.generated_fstab.replace("\\", "\\\\")
        rules = [(pattern.replace("{static_fstab}", static_fstab),
                  repl.replace("{generated_fstab}", generated_fstab))
                 for pattern, repl in rules]

        lines = split_lines(self.cpio.contents(filename))
        new_lines = substitute_lines(lines, rules)

        if new_lines != lines:
            self.cpio.set_contents(filename, join_lines(new_lines))
            self.logger.info(f"Patched {filename} for {self.variant.value}")
