"""
Command-line entry point: tool bootstrap followed by the interactive download loop.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from .config.settings import Settings
from .core.catalog import default_catalog, select_tools
from .core.errors import BootstrapError, ProbeUnavailable
from .core.fetcher import ToolFetcher
from .core.installer import ToolInstaller
from .core.orchestrator import BootstrapOrchestrator
from .core.probe import ToolProbe
from .core.search_path import SearchPathContext
from .integrations.downloader import VideoDownloader
from .integrations.prompts import ask_close, ask_quality, ask_save_dir, ask_url
from .models.installation import InstallOutcome, InstallStatus
from .utils.logging import setup_root_logger


logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Download videos with yt-dlp, installing yt-dlp and ffmpeg on first run"
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file with VIDGRAB_* settings"
    )

    parser.add_argument(
        "--tools-dir",
        type=Path,
        help="Directory to install tools into (default: per-user app data)"
    )

    parser.add_argument(
        "--seed-dir",
        type=Path,
        help="Directory checked for pre-seeded executables (default: current directory)"
    )

    parser.add_argument(
        "--tools",
        nargs="+",
        metavar="NAME",
        help="Tools to bootstrap, in order (default: downloader transcoder)"
    )

    parser.add_argument(
        "--skip-bootstrap",
        action="store_true",
        help="Do not probe or install tools"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console logging level (default: WARNING)"
    )

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Settings:
    """Load settings from the environment, then apply command line overrides."""
    if args.env_file:
        load_dotenv(args.env_file, override=True)
    else:
        load_dotenv()

    settings = Settings()

    if args.tools_dir:
        settings.tools.root = args.tools_dir
    if args.seed_dir:
        settings.tools.seed_dir = args.seed_dir
    if args.tools:
        settings.tools.required = args.tools
    if args.skip_bootstrap:
        settings.skip_bootstrap = True
    if args.log_level:
        settings.logging.level = args.log_level

    return settings


def bootstrap(settings: Settings, context: SearchPathContext, console: Console) -> List[InstallOutcome]:
    """
    Make every required tool available under the given context.

    Raises:
        BootstrapError: If a tool cannot be installed
    """
    specs = select_tools(default_catalog(), settings.tools.required)
    fetcher = ToolFetcher(timeout=settings.tools.download_timeout)
    installer = ToolInstaller(
        tools_root=settings.tools.root,
        context=context,
        fetcher=fetcher,
        seed_dir=settings.tools.seed_dir
    )
    orchestrator = BootstrapOrchestrator(
        specs=specs,
        probe=ToolProbe(context, timeout=settings.tools.probe_timeout),
        installer=installer
    )

    with console.status("Checking external tools..."):
        outcomes = orchestrator.run()

    for outcome in outcomes:
        if outcome.status == InstallStatus.INSTALLED:
            console.print(f"[green]✓ {outcome.tool_name} installed at {outcome.location}[/green]")
    return outcomes


def _ffmpeg_dir(outcomes: List[InstallOutcome]) -> Optional[Path]:
    for outcome in outcomes:
        if outcome.tool_name == "transcoder" and outcome.location is not None:
            return outcome.location.parent
    return None


def _downloader_binary() -> str:
    spec = default_catalog().get("downloader")
    return spec.binary_name if spec else "yt-dlp"


async def interactive_loop(settings: Settings, downloader: VideoDownloader, console: Console) -> None:
    """Prompt for downloads until the user chooses to close."""
    while True:
        url = ask_url(console)
        if url is None:
            continue

        save_dir = ask_save_dir(console, default=settings.download.default_save_dir)
        quality = ask_quality(console)

        console.print("Downloading video...")
        returncode = await downloader.download(url, save_dir, quality)
        if returncode == 0:
            console.print("[green]✓ Video successfully downloaded![/green]")
        else:
            console.print(f"[red]Error while downloading the video (exit code {returncode}).[/red]")

        if ask_close(console):
            console.print("Goodbye!")
            return
        console.print("You can enter a new URL.")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    console = Console()

    try:
        settings = load_config(args)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        return 2

    setup_root_logger(
        settings.logging.file_path,
        settings.logging.level,
        console=console,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
        format_string=settings.logging.format
    )
    logger.info("Starting vidgrab")
    logger.debug(f"Settings: {settings.model_dump()}")

    context = SearchPathContext()
    outcomes: List[InstallOutcome] = []

    if not settings.skip_bootstrap:
        try:
            # Downloads and installer runs block; keep them off the event loop
            outcomes = await asyncio.to_thread(bootstrap, settings, context, console)
        except KeyError as e:
            console.print(f"[red]{e.args[0]}[/red]")
            return 2
        except BootstrapError as e:
            logger.debug("Bootstrap failed", exc_info=True)
            console.print(f"[red]✗ {e}[/red]")
            return 1

    # Tools spawned by tools (yt-dlp running ffmpeg) inherit this process's PATH
    context.apply(os.environ)

    downloader = VideoDownloader(
        context,
        binary_name=_downloader_binary(),
        ffmpeg_dir=_ffmpeg_dir(outcomes),
        output_template=settings.download.output_template
    )

    try:
        await interactive_loop(settings, downloader, console)
    except ProbeUnavailable as e:
        console.print(f"[red]✗ {e}. Run without --skip-bootstrap to install it.[/red]")
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    run()
