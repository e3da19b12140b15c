#!/usr/bin/env python3
"""
Main entry point for vidgrab - interactive video downloader with tool bootstrap
"""

from vidgrab.cli import run


if __name__ == "__main__":
    run()
