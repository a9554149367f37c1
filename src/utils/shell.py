import subprocess
import platform
import os
import logging
from pathlib import Path
from typing import List, Union, Optional


def host_platform() -> tuple:
    """Return (os_name, arch) as used in the bin/ directory layout"""
    system = platform.system().lower()
    if system in ("darwin", "linux"):
        os_name = system
    else:
        os_name = "windows"

    machine = platform.machine().lower()
    if machine in ["aarch64", "arm64"]:
        arch = "aarch64"
    else:
        arch = "x86_64"
    return os_name, arch


class ShellRunner:
    """Runs host tools (magiskboot) bundled under bin/<os>/<arch>/ or found in PATH"""

    def __init__(self, bin_root: Optional[Path] = None):
        self.logger = logging.getLogger("Shell")

        if bin_root is None:
            bin_root = Path(__file__).resolve().parent.parent.parent / "bin"
        os_name, arch = host_platform()
        self.bin_dir = Path(bin_root) / os_name / arch

        if not self.bin_dir.exists():
            self.logger.debug(f"Binary directory not found: {self.bin_dir}, relying on PATH")

    def get_binary_path(self, tool_name: str) -> Path:
        """
        Search Order:
        1. bin/{os}/{arch}/ (Platform specific tools)
        2. System PATH
        """
        bin_path = self.bin_dir / tool_name
        if bin_path.exists():
            return bin_path
        return Path(tool_name)

    def run(self, cmd: Union[str, List[str]], cwd: Optional[Path] = None,
            check: bool = True, capture_output: bool = False) -> subprocess.CompletedProcess:
        """
        :param cmd: List of commands (recommended) or string. e.g. ["magiskboot", "unpack", "boot.img"]
        :param cwd: Working directory for execution
        :param check: If True, raise exception when command returns non-zero
        :param capture_output: Whether to capture stdout/stderr
        """
        if isinstance(cmd, list):
            cmd = list(cmd)
            tool_path = self.get_binary_path(cmd[0])
            if tool_path.is_absolute() and tool_path.exists():
                cmd[0] = str(tool_path)
                if not os.access(tool_path, os.X_OK):
                    os.chmod(tool_path, 0o755)

        cmd_str = " ".join(cmd) if isinstance(cmd, list) else cmd
        self.logger.debug(f"Running: {cmd_str}")

        try:
            return subprocess.run(
                cmd,
                cwd=cwd,
                check=check,
                shell=isinstance(cmd, str),
                text=True,
                capture_output=capture_output,
            )
        except subprocess.CalledProcessError as e:
            self.logger.error(f"Command failed with return code {e.returncode}")
            self.logger.error(f"Command: {cmd_str}")
            if e.stderr:
                self.logger.error(f"Stderr: {e.stderr.strip()}")
            raise
