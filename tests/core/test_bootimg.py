import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.core.bootimg import BootImage
from src.modules.core import CoreRamdiskPatcher


def fake_magiskboot(cmd, cwd=None, **kwargs):
    """Mimic the files magiskboot leaves behind"""
    cwd = Path(cwd)
    if cmd[1] == "unpack":
        (cwd / "ramdisk.cpio").write_bytes(b"070701")
    elif cmd[1] == "cpio" and cmd[-1] == "extract":
        (cwd / "init.rc").write_bytes(b"on init\n")
        (cwd / "init.target.rc").write_bytes(b"on fs\n")
        (cwd / "file_contexts").write_bytes(b"/system(/.*)? u:object_r:system_file:s0\n")
        (cwd / "init.rc").chmod(0o750)
        (cwd / "init.target.rc").chmod(0o750)
        (cwd / "file_contexts").chmod(0o644)
    return subprocess.CompletedProcess(cmd, 0)


@pytest.fixture
def shell():
    mock_shell = MagicMock()
    mock_shell.run.side_effect = fake_magiskboot
    return mock_shell


def test_unpack(tmp_path, shell):
    boot_img = tmp_path / "boot.img"
    boot_img.write_bytes(b"ANDROID!")
    work_dir = tmp_path / "work"

    cpio = BootImage(boot_img, work_dir, shell=shell).unpack()

    assert cpio.filenames() == ["file_contexts", "init.rc", "init.target.rc"]
    assert (work_dir / "boot.img").exists()
    first_cmd = shell.run.call_args_list[0].args[0]
    assert first_cmd == ["magiskboot", "unpack", "boot.img"]


def test_unpack_without_ramdisk(tmp_path):
    boot_img = tmp_path / "boot.img"
    boot_img.write_bytes(b"ANDROID!")
    mock_shell = MagicMock()

    with pytest.raises(FileNotFoundError):
        BootImage(boot_img, tmp_path / "work", shell=mock_shell).unpack()


def test_unpack_missing_image(tmp_path, shell):
    with pytest.raises(FileNotFoundError):
        BootImage(tmp_path / "missing.img", tmp_path / "work", shell=shell).unpack()
    shell.run.assert_not_called()


def test_repack_adds_only_modified_entries(tmp_path, shell):
    boot_img = tmp_path / "boot.img"
    boot_img.write_bytes(b"ANDROID!")
    boot = BootImage(boot_img, tmp_path / "work", shell=shell)
    cpio = boot.unpack()
    shell.run.reset_mock()

    cpio.set_contents("init.target.rc", b"on fs\n    mount_all /.fstab.qcom.gen\n")
    boot.repack(cpio, tmp_path / "patched.img")

    commands = [c.args[0] for c in shell.run.call_args_list]
    assert len(commands) == 2
    assert commands[0][:3] == ["magiskboot", "cpio", str(boot.ramdisk_cpio)]
    assert commands[0][3].startswith("add 0750 init.target.rc ")
    assert commands[1] == ["magiskboot", "repack", "boot.img", str((tmp_path / "patched.img").resolve())]
    assert (boot.ramdisk_dir / "init.target.rc").read_bytes() == b"on fs\n    mount_all /.fstab.qcom.gen\n"


def test_repack_keeps_entry_modes(tmp_path, shell, pc):
    boot_img = tmp_path / "boot.img"
    boot_img.write_bytes(b"ANDROID!")
    boot = BootImage(boot_img, tmp_path / "work", shell=shell)
    cpio = boot.unpack()
    shell.run.reset_mock()

    assert CoreRamdiskPatcher(pc, cpio).patch_ramdisk()
    boot.repack(cpio, tmp_path / "patched.img")

    add_cmd = shell.run.call_args_list[0].args[0][3]
    assert add_cmd.startswith("add 0644 file_contexts ")
    assert (boot.ramdisk_dir / "file_contexts").stat().st_mode & 0o777 == 0o644
