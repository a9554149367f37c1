import importlib
import logging

logger = logging.getLogger("Registry")

# Ramdisk patcher id (<device>/<category>/<variant>) -> class path
RAMDISK_PATCHERS = {
    "jflte/AOSP/AOSP": "src.modules.jflte.JflteAOSPRamdiskPatcher",
    "jflte/GoogleEdition/GoogleEdition": "src.modules.jflte.JflteGoogleEditionRamdiskPatcher",
    "jflte/TouchWiz/TouchWiz": "src.modules.jflte.JflteTouchWizRamdiskPatcher",
}


def ramdisk_patcher_ids() -> list[str]:
    return sorted(RAMDISK_PATCHERS)


def load_ramdisk_patcher_class(patcher_id: str):
    if patcher_id not in RAMDISK_PATCHERS:
        raise KeyError(f"Unknown ramdisk patcher: {patcher_id}")

    module_path, class_name = RAMDISK_PATCHERS[patcher_id].rsplit('.', 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_ramdisk_patcher(patcher_id: str, pc, cpio):
    """Build a fresh patcher instance bound to `cpio`"""
    patcher_class = load_ramdisk_patcher_class(patcher_id)
    logger.debug(f"Using {patcher_class.__name__} for {patcher_id}")
    return patcher_class(pc, cpio)
