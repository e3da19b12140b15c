"""
Configuration settings for vidgrab.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings

from ..core.catalog import REQUIRED_TOOLS, app_data_root, default_tools_root


class ToolsConfig(BaseModel):
    """External tool bootstrap configuration."""
    root: Path = Field(default_factory=default_tools_root, description="Directory holding installed tools")
    seed_dir: Path = Field(default_factory=Path.cwd, description="Directory checked for pre-seeded executables")
    required: List[str] = Field(default_factory=lambda: list(REQUIRED_TOOLS), description="Tools to bootstrap, in order")
    download_timeout: Optional[float] = Field(None, description="Socket timeout for artifact downloads (None blocks)")
    probe_timeout: Optional[float] = Field(default=30.0, description="Time limit for a single probe process")


class DownloadConfig(BaseModel):
    """Video download configuration."""
    default_save_dir: Optional[Path] = Field(None, description="Folder suggested at the save-path prompt")
    output_template: str = Field(default="%(title)s.%(ext)s", description="yt-dlp output file template")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="WARNING", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format"
    )
    file_path: Optional[Path] = Field(default_factory=lambda: app_data_root() / "logs" / "vidgrab.log")
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")

    @validator("level")
    def validate_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown logging level: {v}")
        return level


class Settings(BaseSettings):
    """Main application settings."""
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    skip_bootstrap: bool = Field(default=False, description="Assume tools are already on PATH")

    class Config:
        env_prefix = "VIDGRAB_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"
