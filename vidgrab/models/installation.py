"""
Probe and installation result models.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class InstallStatus(str, Enum):
    """Result of making a tool available."""
    ALREADY_AVAILABLE = "already_available"
    INSTALLED = "installed"
    FAILED = "failed"


class ProbeResult(BaseModel):
    """Outcome of an availability probe."""
    available: bool
    location: Optional[Path] = Field(None, description="Resolved executable, if known")
    via_fallback: bool = Field(default=False, description="Found in a fallback location rather than the search path")


class InstallOutcome(BaseModel):
    """Result of attempting to make a tool available."""
    tool_name: str = Field(..., description="Logical tool name")
    status: InstallStatus
    location: Optional[Path] = Field(None, description="Executable location on success")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_type: Optional[str] = Field(None, description="Error class name if failed")

    @property
    def success(self) -> bool:
        return self.status != InstallStatus.FAILED

    @classmethod
    def already_available(cls, tool_name: str, location: Optional[Path]) -> "InstallOutcome":
        return cls(tool_name=tool_name, status=InstallStatus.ALREADY_AVAILABLE, location=location)

    @classmethod
    def installed(cls, tool_name: str, location: Path) -> "InstallOutcome":
        return cls(tool_name=tool_name, status=InstallStatus.INSTALLED, location=location)

    @classmethod
    def failed(cls, tool_name: str, cause: BaseException) -> "InstallOutcome":
        return cls(
            tool_name=tool_name,
            status=InstallStatus.FAILED,
            error=str(cause),
            error_type=type(cause).__name__
        )

    class Config:
        json_schema_extra = {
            "example": {
                "tool_name": "downloader",
                "status": "installed",
                "location": "/home/user/.local/share/vidgrab/tools/yt-dlp/yt-dlp"
            }
        }
