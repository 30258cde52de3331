"""Error taxonomy raised by sandboxed file system operations."""

from typing import Optional


class SandboxError(Exception):
    """Base class for every failure surfaced by the file system."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PermissionDenied(SandboxError):
    """Raised when a path escapes the sandbox root or targets the root's parent."""

    def __init__(self, reason: str = "No permission to access this file"):
        super().__init__(reason)


class NotADirectory(SandboxError):
    """Raised when a directory operation receives a non-directory handle."""

    def __init__(self, reason: str = "Not a directory"):
        super().__init__(reason)


class IOFailure(SandboxError):
    """Raised when a native file operation reports failure."""

    def __init__(self, reason: str, errno: Optional[int] = None):
        super().__init__(reason)
        self.errno = errno

    @classmethod
    def from_os_error(cls, reason: str, error: OSError) -> "IOFailure":
        """Build a failure carrying the native errno of ``error``."""
        return cls(reason, error.errno)


class NotFound(IOFailure):
    """Raised when the native layer reports that the target does not exist."""
