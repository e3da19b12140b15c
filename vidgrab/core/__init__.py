"""
Core modules for tool bootstrap.
"""

from .errors import (
    ArchiveFormatError,
    BootstrapError,
    ChecksumMismatchError,
    InstallerExitFailure,
    InstallIOError,
    NetworkError,
    ProbeUnavailable,
    ToolError,
)
from .search_path import SearchPathContext
from .probe import ToolProbe
from .fetcher import ToolFetcher
from .installer import ToolInstaller
from .orchestrator import BootstrapOrchestrator

__all__ = [
    "ArchiveFormatError",
    "BootstrapError",
    "ChecksumMismatchError",
    "InstallerExitFailure",
    "InstallIOError",
    "NetworkError",
    "ProbeUnavailable",
    "ToolError",
    "SearchPathContext",
    "ToolProbe",
    "ToolFetcher",
    "ToolInstaller",
    "BootstrapOrchestrator"
]
