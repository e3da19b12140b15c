import io
import sys
import urllib.error
import zipfile
from pathlib import Path

import pytest


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts as fake tools")


class FakeOpener:
    """Stands in for urllib.request.urlopen and records every request."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, request, timeout=None):
        url = request.full_url if hasattr(request, "full_url") else request
        self.calls.append(url)
        body = self.responses.get(url)
        if body is None:
            raise urllib.error.URLError("Name or service not known")
        if isinstance(body, Exception):
            raise body
        return io.BytesIO(body)


def shell_script(exit_code=0, padding=0):
    content = f"#!/bin/sh\nexit {exit_code}\n".encode()
    if padding:
        content += b"#" + b"x" * padding + b"\n"
    return content


def make_zip(entries):
    """entries: {archive path: (bytes, unix mode)}"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, (data, mode) in entries.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = mode << 16
            archive.writestr(info, data)
    return buffer.getvalue()


def write_tool(directory: Path, name: str, exit_code=0) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_bytes(shell_script(exit_code))
    tool.chmod(0o755)
    return tool
