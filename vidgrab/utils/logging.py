"""
Logging configuration and utilities.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def setup_root_logger(log_file: Optional[Path] = None,
                      level: str = "WARNING",
                      console: Optional[Console] = None,
                      max_file_size_mb: int = 10,
                      backup_count: int = 5,
                      format_string: Optional[str] = None) -> logging.Logger:
    """
    Set up the root logger for the application.

    Console output goes through rich so log lines and prompts share one
    console; the optional file handler always records at DEBUG.

    Args:
        log_file: Optional log file path
        level: Console logging level
        console: Rich console to log to
        max_file_size_mb: Rotate the log file at this size
        backup_count: Number of rotated files to keep
        format_string: Log format for the file handler

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    console_handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
        root_logger.addHandler(file_handler)

    # Set levels for third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    return root_logger
