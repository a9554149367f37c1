import logging
from abc import ABC, abstractmethod
from enum import Enum, auto

from src.core.errors import PatcherError


class PatchState(Enum):
    NOT_RUN = auto()
    RUNNING = auto()
    SUCCEEDED = auto()
    FAILED = auto()


class RamdiskPatcher(ABC):
    """
    Anything that patches a ramdisk archive: a single step or a pipeline.
    patch_ramdisk() returns False on failure and keeps the error on
    self.error, so callers never see an exception.
    """

    Id = ""

    def __init__(self, pc, cpio):
        """
        :param pc: PatcherConfig with the ramdisk constants
        :param cpio: CpioFile being patched (not owned by the patcher)
        """
        self.pc = pc
        self.cpio = cpio
        self.error = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def id(self) -> str:
        return self.Id

    @abstractmethod
    def patch_ramdisk(self) -> bool:
        pass


class BaseRamdiskPatcher(RamdiskPatcher):
    """
    A single patch step. Subclasses implement _patch() and raise
    PatcherError when a required entry is missing.
    """

    @abstractmethod
    def _patch(self):
        pass

    def patch_ramdisk(self) -> bool:
        try:
            self._patch()
        except PatcherError as e:
            self.error = e
            self.logger.error(f"[{self.id()}] {e}")
            return False
        return True


class RamdiskPipeline(RamdiskPatcher):
    """
    Fixed, ordered list of patch steps run against one archive.
    The first failing step stops the pipeline and its error is kept as-is.
    """

    def __init__(self, pc, cpio):
        super().__init__(pc, cpio)
        self.state = PatchState.NOT_RUN
        self.failed_step = None

    @abstractmethod
    def steps(self) -> list:
        """Return the step instances in the order they must run"""
        pass

    def patch_ramdisk(self) -> bool:
        if self.state != PatchState.NOT_RUN:
            raise RuntimeError(f"{self.id()} has already been run; create a new instance")

        self.state = PatchState.RUNNING
        self.logger.info(f"Patching ramdisk with {self.id()}...")

        for step in self.steps():
            self.logger.debug(f"Running step: {step.id()}")
            if not step.patch_ramdisk():
                self.error = step.error
                self.failed_step = step.id()
                self.state = PatchState.FAILED
                self.logger.error(f"{self.id()} failed at step '{self.failed_step}'")
                return False

        self.state = PatchState.SUCCEEDED
        self.logger.info(f"{self.id()} completed.")
        return True
