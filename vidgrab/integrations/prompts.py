"""
Interactive prompts for the download loop.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.prompt import Confirm, Prompt


VIDEO_URL_PATTERNS = [
    re.compile(r"^https?://(www\.|m\.|music\.)?youtube\.com/watch\?(.*&)?v=[\w-]{6,}"),
    re.compile(r"^https?://(www\.|m\.)?youtube\.com/shorts/[\w-]{6,}"),
    re.compile(r"^https?://youtu\.be/[\w-]{6,}"),
]

# (label, quality key) in menu order
QUALITY_CHOICES: List[Tuple[str, str]] = [
    ("Best quality", "best"),
    ("Medium quality (720p)", "medium"),
    ("Low quality (480p)", "low"),
    ("Audio only (mp3)", "audio"),
]


def clean_url(url: str) -> str:
    """Strip whitespace and quotes pasted along with a URL."""
    return url.strip().strip('"').strip("'").strip()


def is_valid_video_url(url: str) -> bool:
    url = clean_url(url)
    return any(pattern.match(url) for pattern in VIDEO_URL_PATTERNS)


def ask_url(console: Console) -> Optional[str]:
    """Ask for a video URL; returns None if the URL is not a video link."""
    url = clean_url(Prompt.ask("Enter the video URL", console=console))
    if not is_valid_video_url(url):
        console.print("[red]Error: invalid YouTube URL.[/red]")
        return None
    return url


def ask_save_dir(console: Console, default: Optional[Path] = None) -> Path:
    """Ask for a destination folder until an existing directory is given."""
    while True:
        raw = Prompt.ask(
            "Enter the save path",
            console=console,
            default=str(default) if default else None
        )
        path = Path(clean_url(raw or "")).expanduser()
        if raw and path.is_dir():
            return path.resolve()
        console.print("[red]Error: the specified folder does not exist. Please enter a valid path.[/red]")


def ask_quality(console: Console) -> str:
    """Single-choice quality menu; returns the quality key."""
    console.print("[bold]Select video quality:[/bold]")
    for i, (label, _) in enumerate(QUALITY_CHOICES, 1):
        console.print(f"  [cyan]{i}[/cyan]. {label}")

    choice = Prompt.ask(
        "Your choice",
        console=console,
        choices=[str(i) for i in range(1, len(QUALITY_CHOICES) + 1)],
        default="1"
    )
    return QUALITY_CHOICES[int(choice) - 1][1]


def ask_close(console: Console) -> bool:
    return Confirm.ask("Do you want to close the program?", console=console, default=False)
