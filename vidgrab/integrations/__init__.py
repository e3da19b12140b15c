"""
Integration modules for the external downloader and the interactive prompts.
"""

from .downloader import QUALITY_FORMATS, VideoDownloader, build_download_command

__all__ = ["QUALITY_FORMATS", "VideoDownloader", "build_download_command"]
