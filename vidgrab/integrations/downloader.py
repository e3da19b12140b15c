"""
Runs the external downloader (yt-dlp) as a child process.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..core.errors import ProbeUnavailable
from ..core.search_path import SearchPathContext


QUALITY_FORMATS: Dict[str, str] = {
    "best": "best",
    "medium": "bv*[height<=720]+ba/b",
    "low": "bv*[height<=480]+ba/b",
    "audio": "ba/b",
}


def build_download_command(executable: Path,
                           url: str,
                           save_dir: Path,
                           quality: str,
                           output_template: str = "%(title)s.%(ext)s",
                           ffmpeg_dir: Optional[Path] = None) -> List[str]:
    """
    Build the yt-dlp command line for one download.

    Unknown quality keys fall back to "best".
    """
    command = [
        str(executable),
        "-f", QUALITY_FORMATS.get(quality, QUALITY_FORMATS["best"]),
        "-o", str(Path(save_dir) / output_template),
    ]
    if quality == "audio":
        command += ["-x", "--audio-format", "mp3"]
    if ffmpeg_dir is not None:
        command += ["--ffmpeg-location", str(ffmpeg_dir)]
    command.append(url)
    return command


class VideoDownloader:
    """Spawns yt-dlp under an explicit search-path context."""

    def __init__(self,
                 context: SearchPathContext,
                 binary_name: str = "yt-dlp",
                 ffmpeg_dir: Optional[Path] = None,
                 output_template: str = "%(title)s.%(ext)s"):
        self.logger = logging.getLogger(__name__)
        self.context = context
        self.binary_name = binary_name
        self.ffmpeg_dir = ffmpeg_dir
        self.output_template = output_template

    async def download(self, url: str, save_dir: Path, quality: str) -> int:
        """
        Download a video, letting the child write its progress to the terminal.

        Returns:
            The downloader's exit code

        Raises:
            ProbeUnavailable: If the downloader cannot be resolved on the search path
        """
        executable = self.context.which(self.binary_name)
        if executable is None:
            raise ProbeUnavailable(self.binary_name)

        command = build_download_command(
            executable, url, save_dir, quality,
            output_template=self.output_template,
            ffmpeg_dir=self.ffmpeg_dir
        )
        self.logger.info(f"Running: {' '.join(command)}")

        process = await asyncio.create_subprocess_exec(*command, env=self.context.env())
        returncode = await process.wait()
        self.logger.info(f"Downloader exited with {returncode}")
        return returncode
