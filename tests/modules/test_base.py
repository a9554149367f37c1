import pytest

from src.core.cpio import CpioFile
from src.core.errors import PatcherError
from src.modules.base import BaseRamdiskPatcher, PatchState, RamdiskPatcher, RamdiskPipeline


class TouchInitRc(BaseRamdiskPatcher):
    Id = "touch"

    def _patch(self):
        if not self.cpio.exists("init.rc"):
            raise PatcherError.entry_not_found("init.rc")
        self.cpio.set_contents("init.rc", self.cpio.contents("init.rc") + b"# patched\n")


class TouchPipeline(RamdiskPipeline):
    Id = "test/Touch/Touch"

    def steps(self):
        return [TouchInitRc(self.pc, self.cpio)]


def test_pipeline_only_needs_steps(pc):
    cpio = CpioFile({"init.rc": b"on init\n"})
    pipeline = TouchPipeline(pc, cpio)

    assert isinstance(pipeline, RamdiskPatcher)
    assert not isinstance(pipeline, BaseRamdiskPatcher)
    assert not hasattr(pipeline, "_patch")
    assert pipeline.patch_ramdisk()
    assert pipeline.state == PatchState.SUCCEEDED
    assert cpio.contents("init.rc") == b"on init\n# patched\n"


def test_step_without_patch_hook_cannot_be_built(pc):
    class Incomplete(BaseRamdiskPatcher):
        Id = "incomplete"

    with pytest.raises(TypeError):
        Incomplete(pc, CpioFile({}))


def test_step_error_is_kept_on_step(pc):
    step = TouchInitRc(pc, CpioFile({}))

    assert not step.patch_ramdisk()
    assert step.error.filename == "init.rc"
