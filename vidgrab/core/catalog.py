"""
Static catalog of the external tools vidgrab depends on.
"""

import os
import platform
from pathlib import Path
from typing import Dict, List, Optional

from ..models.tool import (
    ArchiveArtifact,
    ExecutableArtifact,
    SilentInstallerArtifact,
    ToolSpec,
)


APP_DIR_NAME = "vidgrab"
WINDOWS_FALLBACK_ROOT = Path("C:/vidgrab")

YT_DLP_RELEASES = "https://github.com/yt-dlp/yt-dlp/releases/latest/download"
FFMPEG_RELEASES = "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest"

# Install order matters: the downloader comes first, the player is optional
REQUIRED_TOOLS = ["downloader", "transcoder"]


def app_data_root(environ: Optional[Dict[str, str]] = None, system: Optional[str] = None) -> Path:
    """Per-user application data directory for vidgrab."""
    environ = os.environ if environ is None else environ
    system = system or platform.system()

    if system == "Windows":
        appdata = environ.get("APPDATA")
        return Path(appdata) / APP_DIR_NAME if appdata else WINDOWS_FALLBACK_ROOT
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


def default_tools_root(environ: Optional[Dict[str, str]] = None, system: Optional[str] = None) -> Path:
    return app_data_root(environ, system) / "tools"


def _windows_catalog() -> List[ToolSpec]:
    return [
        ToolSpec(
            name="downloader",
            binary_name="yt-dlp.exe",
            url=f"{YT_DLP_RELEASES}/yt-dlp.exe",
            artifact=ExecutableArtifact(),
            subfolder="yt-dlp"
        ),
        ToolSpec(
            name="transcoder",
            binary_name="ffmpeg.exe",
            probe_args=["-version"],
            url=f"{FFMPEG_RELEASES}/ffmpeg-master-latest-win64-gpl.zip",
            artifact=ArchiveArtifact(binary_path="bin/ffmpeg.exe", flatten=True),
            subfolder="ffmpeg"
        ),
        ToolSpec(
            name="player",
            binary_name="vlc.exe",
            fallback_paths=[
                Path("C:/Program Files/VideoLAN/VLC/vlc.exe"),
                Path("C:/Program Files (x86)/VideoLAN/VLC/vlc.exe"),
            ],
            url="https://get.videolan.org/vlc/last/win64/vlc-3.0.21-win64.exe",
            artifact=SilentInstallerArtifact(binary_path="vlc.exe", flags=["/L=1033", "/S"], install_dir_flag="/D="),
            subfolder="vlc"
        ),
    ]


def _macos_catalog() -> List[ToolSpec]:
    return [
        ToolSpec(
            name="downloader",
            binary_name="yt-dlp",
            fallback_paths=[Path("/opt/homebrew/bin/yt-dlp"), Path("/usr/local/bin/yt-dlp")],
            url=f"{YT_DLP_RELEASES}/yt-dlp_macos",
            artifact=ExecutableArtifact(),
            subfolder="yt-dlp"
        ),
        ToolSpec(
            name="transcoder",
            binary_name="ffmpeg",
            probe_args=["-version"],
            fallback_paths=[Path("/opt/homebrew/bin/ffmpeg"), Path("/usr/local/bin/ffmpeg")],
            url="https://evermeet.cx/ffmpeg/getrelease/zip",
            artifact=ArchiveArtifact(binary_path="ffmpeg", flatten=False),
            subfolder="ffmpeg"
        ),
    ]


def _linux_catalog() -> List[ToolSpec]:
    return [
        ToolSpec(
            name="downloader",
            binary_name="yt-dlp",
            fallback_paths=[Path("/usr/local/bin/yt-dlp"), Path("/usr/bin/yt-dlp")],
            url=f"{YT_DLP_RELEASES}/yt-dlp_linux",
            artifact=ExecutableArtifact(),
            subfolder="yt-dlp"
        ),
        ToolSpec(
            name="transcoder",
            binary_name="ffmpeg",
            probe_args=["-version"],
            fallback_paths=[Path("/usr/local/bin/ffmpeg"), Path("/usr/bin/ffmpeg")],
            url=f"{FFMPEG_RELEASES}/ffmpeg-master-latest-linux64-gpl.tar.xz",
            artifact=ArchiveArtifact(binary_path="bin/ffmpeg", flatten=True),
            subfolder="ffmpeg"
        ),
    ]


def default_catalog(system: Optional[str] = None) -> Dict[str, ToolSpec]:
    """Tool specs for the given platform, keyed by logical name."""
    system = system or platform.system()
    if system == "Windows":
        specs = _windows_catalog()
    elif system == "Darwin":
        specs = _macos_catalog()
    else:
        specs = _linux_catalog()
    return {spec.name: spec for spec in specs}


def select_tools(catalog: Dict[str, ToolSpec], names: Optional[List[str]] = None) -> List[ToolSpec]:
    """
    Pick tools from the catalog in the order given.

    Raises:
        KeyError: If a name is not in the catalog for this platform
    """
    names = names or REQUIRED_TOOLS
    missing = [n for n in names if n not in catalog]
    if missing:
        raise KeyError(f"Unknown tool(s) for this platform: {', '.join(missing)}")
    return [catalog[n] for n in names]
