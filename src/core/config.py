import json
import logging
from pathlib import Path


class PatcherConfig:
    """
    Constants used by the ramdisk patchers.
    Defaults match the jflte (Galaxy S4) multiboot layout and can be
    overridden per device through devices/<device>/ramdisk.json.
    """

    DEFAULTS = {
        # SELinux label for /data/media, missing from some ROMs' file_contexts
        "data_media_context": "/data/media(/.*)? u:object_r:media_rw_data_file:s0",
        "cache_fstab_line": "/dev/block/platform/msm_sdcc.1/by-name/cache /cache ext4 nosuid,nodev,barrier=1 wait,check",
        "static_fstab": "fstab.qcom",
        "generated_fstab": "/.fstab.qcom.gen",
        "mbtool_path": "/mbtool",
        "charger_fstab": "/fstab.jgedlte",
        "charger_wait_timeout": 15,
    }

    def __init__(self, **overrides):
        self.logger = logging.getLogger("PatcherConfig")
        for key, value in self.DEFAULTS.items():
            setattr(self, key, value)
        self.update(overrides)

    def update(self, values: dict):
        for key, value in values.items():
            if key not in self.DEFAULTS:
                self.logger.warning(f"Ignoring unknown ramdisk config key: {key}")
                continue
            setattr(self, key, value)

    @property
    def charger_completed_marker(self) -> str:
        # mbtool touches /.<fstab name>.completed once mounting is done
        name = Path(self.charger_fstab).name
        return f"/.{name}.completed"

    @classmethod
    def load(cls, device: str = None, root: str | Path = "devices") -> "PatcherConfig":
        """
        Load ramdisk.json from common and device folder.
        Strategy: Override (Defaults <- Common <- Device)
        """
        config = cls()
        root = Path(root)

        candidates = [root / "common" / "ramdisk.json"]
        if device:
            candidates.append(root / device / "ramdisk.json")

        for cfg_path in candidates:
            if not cfg_path.exists():
                continue
            try:
                with open(cfg_path, 'r') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                config.logger.error(f"Failed to load {cfg_path}: {e}")
                continue

            if isinstance(data, dict):
                config.update(data)
                config.logger.info(f"Loaded ramdisk config from {cfg_path}.")
            else:
                config.logger.warning(f"Skipping {cfg_path}: expected a JSON object")

        return config
