"""
Data models for vidgrab.
"""

from .tool import (
    ArchiveArtifact,
    ArtifactKind,
    ExecutableArtifact,
    SilentInstallerArtifact,
    ToolSpec,
)
from .installation import InstallOutcome, InstallStatus, ProbeResult

__all__ = [
    "ArchiveArtifact",
    "ArtifactKind",
    "ExecutableArtifact",
    "SilentInstallerArtifact",
    "ToolSpec",
    "InstallOutcome",
    "InstallStatus",
    "ProbeResult"
]
