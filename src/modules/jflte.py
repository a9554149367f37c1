"""
Ramdisk patchers for the Samsung Galaxy S 4 (jflte).

Supported ramdisk types:
1. AOSP or AOSP-derived ramdisks
2. Google Edition (Google Play Edition) ramdisks
3. TouchWiz (Android 4.2-4.4) ramdisks
"""
import re

from src.core.errors import PatcherError
from src.utils.lines import insert_before_match, join_lines, split_lines
from .base import BaseRamdiskPatcher, RamdiskPipeline
from .core import CoreRamdiskPatcher
from .galaxy import GalaxyRamdiskPatcher, SkinVariant
from .qcom import INIT_TARGET_RC, QcomRamdiskPatcher

INIT_RC = "init.rc"

SYSTEM_MOUNT_REGEX = re.compile(r"mount.*/system")
ON_CHARGER_REGEX = re.compile(r"on\s+charger")


class JflteChargerModePatcher(BaseRamdiskPatcher):
    """
    Google Edition mounts /system in charger mode straight from init.rc.
    Have mbtool mount the generated fstab first and wait for it to finish.

    Not idempotent: running it twice appends the service twice.
    """

    Id = "jflte/charger"

    SERVICE_NAME = "mbtool-charger"

    def _patch(self):
        self.charger_mode_mount()

    def charger_mode_mount(self):
        if not self.cpio.exists(INIT_RC):
            raise PatcherError.entry_not_found(INIT_RC)

        lines = split_lines(self.cpio.contents(INIT_RC))

        injected = [
            f"    start {self.SERVICE_NAME}",
            f"    wait {self.pc.charger_completed_marker} {self.pc.charger_wait_timeout}",
        ]
        service = [
            f"service {self.SERVICE_NAME} {self.pc.mbtool_path} mount_fstab {self.pc.charger_fstab}",
            "    class core",
            "    critical",
            "    oneshot",
        ]

        new_lines = insert_before_match(lines, SYSTEM_MOUNT_REGEX, ON_CHARGER_REGEX,
                                        injected, trailing=service)

        self.cpio.set_contents(INIT_RC, join_lines(new_lines))
        self.logger.info(f"Added {self.SERVICE_NAME} service to {INIT_RC}")


class JflteAOSPRamdiskPatcher(RamdiskPipeline):
    Id = "jflte/AOSP/AOSP"

    def steps(self):
        return [
            CoreRamdiskPatcher(self.pc, self.cpio),
            QcomRamdiskPatcher(self.pc, self.cpio, skip_paths=[], script=INIT_TARGET_RC),
        ]


class JflteGoogleEditionRamdiskPatcher(RamdiskPipeline):
    Id = "jflte/GoogleEdition/GoogleEdition"

    def __init__(self, pc, cpio):
        super().__init__(pc, cpio)
        self.variant = SkinVariant.detect(cpio)

    def steps(self):
        return [
            CoreRamdiskPatcher(self.pc, self.cpio),
            JflteChargerModePatcher(self.pc, self.cpio),
            QcomRamdiskPatcher(self.pc, self.cpio, skip_paths=[], script=INIT_TARGET_RC),
            GalaxyRamdiskPatcher(self.pc, self.cpio, self.variant),
        ]


class JflteTouchWizRamdiskPatcher(RamdiskPipeline):
    Id = "jflte/TouchWiz/TouchWiz"

    def __init__(self, pc, cpio):
        super().__init__(pc, cpio)
        self.variant = SkinVariant.detect(cpio)

    def steps(self):
        return [
            CoreRamdiskPatcher(self.pc, self.cpio),
            QcomRamdiskPatcher(self.pc, self.cpio, skip_paths=[], script=INIT_TARGET_RC),
            GalaxyRamdiskPatcher(self.pc, self.cpio, self.variant),
        ]
