"""
Tool-related data models.
"""

from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, validator


class ExecutableArtifact(BaseModel):
    """A bare executable downloaded verbatim to the install directory."""
    kind: Literal["executable"] = "executable"

    def relative_executable(self, binary_name: str) -> Path:
        return Path(binary_name)

    class Config:
        frozen = True


class ArchiveArtifact(BaseModel):
    """A compressed archive with the executable at a known relative path."""
    kind: Literal["archive"] = "archive"
    binary_path: str = Field(..., description="Executable path relative to the install directory")
    flatten: bool = Field(
        default=True,
        description="Strip the archive's single top-level directory when extracting"
    )

    def relative_executable(self, binary_name: str) -> Path:
        return Path(self.binary_path)

    class Config:
        frozen = True


class SilentInstallerArtifact(BaseModel):
    """A self-installing executable run unattended."""
    kind: Literal["silent_installer"] = "silent_installer"
    binary_path: str = Field(..., description="Executable path relative to the install directory")
    flags: List[str] = Field(default_factory=lambda: ["/S"], description="Unattended-mode flags")
    install_dir_flag: Optional[str] = Field(
        None,
        description="Flag prefix receiving the install directory, appended last (e.g. '/D=')"
    )

    def relative_executable(self, binary_name: str) -> Path:
        return Path(self.binary_path)

    class Config:
        frozen = True


ArtifactKind = Annotated[
    Union[ExecutableArtifact, ArchiveArtifact, SilentInstallerArtifact],
    Field(discriminator="kind"),
]


class ToolSpec(BaseModel):
    """Specification for an external tool the program depends on."""
    name: str = Field(..., description="Logical tool name (downloader, transcoder, player)")
    binary_name: str = Field(..., description="Executable file name looked up on the search path")
    probe_args: List[str] = Field(default_factory=lambda: ["--version"], description="Arguments for the availability probe")
    fallback_paths: List[Path] = Field(default_factory=list, description="Well-known install locations")
    url: str = Field(..., description="Remote artifact URL")
    artifact: ArtifactKind = Field(default_factory=ExecutableArtifact)
    subfolder: str = Field(..., description="Folder under the tools root holding this tool")
    sha256: Optional[str] = Field(None, description="Expected SHA-256 of the artifact")

    @validator("url")
    def validate_url_scheme(cls, v):
        if not v.startswith(("https://", "http://", "file://")):
            raise ValueError(f"Unsupported artifact URL: {v}")
        return v

    @validator("sha256")
    def normalize_digest(cls, v):
        return v.lower() if v else v

    def target_dir(self, tools_root: Path) -> Path:
        """Directory the tool is installed into."""
        return Path(tools_root) / self.subfolder

    def executable_path(self, tools_root: Path) -> Path:
        """Final on-disk location of the executable; its presence marks the tool installed."""
        return self.target_dir(tools_root) / self.artifact.relative_executable(self.binary_name)

    def bin_dir(self, tools_root: Path) -> Path:
        """Directory to put on the search path."""
        return self.executable_path(tools_root).parent

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "transcoder",
                "binary_name": "ffmpeg",
                "probe_args": ["-version"],
                "url": "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest/ffmpeg-master-latest-linux64-gpl.tar.xz",
                "artifact": {"kind": "archive", "binary_path": "bin/ffmpeg", "flatten": True},
                "subfolder": "ffmpeg"
            }
        }
