"""
Configuration for vidgrab.
"""

from .settings import DownloadConfig, LoggingConfig, Settings, ToolsConfig

__all__ = ["DownloadConfig", "LoggingConfig", "Settings", "ToolsConfig"]
