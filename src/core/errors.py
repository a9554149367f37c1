from enum import Enum, auto


class ErrorKind(Enum):
    ENTRY_NOT_FOUND = auto()    # Required ramdisk entry is missing
    MALFORMED_CONTENT = auto()  # Reserved for structural validation


class PatcherError(Exception):
    """Error raised by a ramdisk patch step, tied to one archive entry."""

    def __init__(self, kind: ErrorKind, filename: str, message: str = None):
        self.kind = kind
        self.filename = filename
        if message is None:
            if kind == ErrorKind.ENTRY_NOT_FOUND:
                message = f"Entry not found in ramdisk: {filename}"
            else:
                message = f"Malformed content in ramdisk entry: {filename}"
        super().__init__(message)

    @classmethod
    def entry_not_found(cls, filename: str) -> "PatcherError":
        return cls(ErrorKind.ENTRY_NOT_FOUND, filename)

    @classmethod
    def malformed_content(cls, filename: str, message: str = None) -> "PatcherError":
        return cls(ErrorKind.MALFORMED_CONTENT, filename, message)


class PipelineFailedError(Exception):
    """A ramdisk patcher pipeline stopped at its first failing step."""

    def __init__(self, patcher_id: str, step: str, error: PatcherError):
        self.patcher_id = patcher_id
        self.step = step
        self.error = error
        super().__init__(f"[{patcher_id}] step '{step}' failed: {error}")
