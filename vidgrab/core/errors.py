"""
Error types raised while probing, fetching and installing external tools.
"""

from typing import Optional


class ToolError(Exception):
    """Base class for tool bootstrap errors."""

    pass


class ProbeUnavailable(ToolError):
    """Tool could not be launched from the search path or any fallback location."""

    def __init__(self, tool_name: str):
        super().__init__(f"{tool_name} is not available")
        self.tool_name = tool_name


class NetworkError(ToolError):
    """Remote artifact could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ArchiveFormatError(ToolError):
    """Downloaded archive is corrupt or of an unsupported type."""

    pass


class InstallIOError(ToolError):
    """Filesystem operation failed during installation."""

    pass


class InstallerExitFailure(ToolError):
    """Self-installing executable returned a failing exit status."""

    def __init__(self, url: str, returncode: int):
        super().__init__(f"Installer from {url} exited with status {returncode}")
        self.url = url
        self.returncode = returncode


class ChecksumMismatchError(ToolError):
    """Artifact digest does not match the expected value."""

    def __init__(self, url: str, expected: str, actual: str):
        super().__init__(f"SHA-256 mismatch for {url}: expected {expected}, got {actual}")
        self.url = url
        self.expected = expected
        self.actual = actual


class BootstrapError(ToolError):
    """A required tool could not be made available; the run cannot continue."""

    def __init__(self, tool_name: str, cause: Optional[str] = None):
        message = f"Could not install required tool '{tool_name}'"
        if cause:
            message += f": {cause}"
        super().__init__(message)
        self.tool_name = tool_name
        self.cause = cause
