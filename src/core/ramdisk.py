import logging
import shutil
from pathlib import Path

from src.core.bootimg import BootImage
from src.core.config import PatcherConfig
from src.core.cpio import CpioFile
from src.core.errors import PipelineFailedError
from src.core.registry import create_ramdisk_patcher


class RamdiskPatchJob:
    """
    Selects a ramdisk patcher by id, runs it and persists the result.
    Nothing is written when the patcher fails.
    """

    def __init__(self, patcher_id: str, pc: PatcherConfig = None, config_root: str | Path = "devices"):
        """
        :param patcher_id: Registered id, <device>/<category>/<variant>
        :param pc: Explicit config; loaded from config_root for the id's device if omitted
        """
        self.patcher_id = patcher_id
        if pc is None:
            device = patcher_id.split("/", 1)[0]
            pc = PatcherConfig.load(device, root=config_root)
        self.pc = pc
        self.logger = logging.getLogger("RamdiskJob")

    def patch(self, cpio: CpioFile):
        patcher = create_ramdisk_patcher(self.patcher_id, self.pc, cpio)
        if not patcher.patch_ramdisk():
            raise PipelineFailedError(self.patcher_id, patcher.failed_step, patcher.error) from patcher.error

        self.logger.info(f"Modified entries: {', '.join(cpio.modified()) or 'none'}")
        return cpio

    def patch_directory(self, src_dir: str | Path, out_dir: str | Path):
        """Patch an extracted ramdisk tree into out_dir"""
        src_dir = Path(src_dir)
        out_dir = Path(out_dir)

        cpio = CpioFile.from_directory(src_dir)
        self.patch(cpio)

        if out_dir.resolve() != src_dir.resolve():
            shutil.copytree(src_dir, out_dir, symlinks=True, dirs_exist_ok=True)
        cpio.write_to_directory(out_dir, only_modified=True)
        self.logger.info(f"Patched ramdisk saved to {out_dir}")

    def patch_boot_image(self, boot_img: str | Path, out_img: str | Path, work_dir: str | Path, shell=None):
        boot = BootImage(boot_img, work_dir, shell=shell)
        cpio = boot.unpack()
        self.patch(cpio)
        boot.repack(cpio, out_img)
