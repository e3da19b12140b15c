"""
Retrieval of remote tool artifacts: bare executables, archives and installers.
"""

import hashlib
import http.client
import logging
import os
import shutil
import subprocess
import tarfile
import tempfile
import urllib.error
import urllib.request
import zipfile
import zlib
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import (
    ArchiveFormatError,
    ChecksumMismatchError,
    InstallerExitFailure,
    InstallIOError,
    NetworkError,
)


DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB
USER_AGENT = "vidgrab-bootstrap"


def build_installer_command(installer: Path,
                            flags: List[str],
                            install_dir: Optional[Path] = None,
                            install_dir_flag: Optional[str] = None,
                            windows: Optional[bool] = None) -> Union[str, List[str]]:
    """
    Command line for a silent installer.

    NSIS reads the install directory flag raw up to the end of the command
    line, so on Windows it is appended unquoted to a string command even when
    the path contains spaces.
    """
    windows = os.name == "nt" if windows is None else windows
    command = [str(installer), *flags]
    if install_dir is None or not install_dir_flag:
        return subprocess.list2cmdline(command) if windows else command

    install_arg = f"{install_dir_flag}{install_dir}"
    if windows:
        return f"{subprocess.list2cmdline(command)} {install_arg}"
    return command + [install_arg]


class ToolFetcher:
    """Downloads artifacts with a single blocking attempt and no retries."""

    def __init__(self,
                 opener: Optional[Callable] = None,
                 timeout: Optional[float] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 temp_dir: Optional[Path] = None):
        """
        Initialize the fetcher.

        Args:
            opener: Callable with the urllib.request.urlopen signature
            timeout: Socket timeout in seconds; None blocks indefinitely
            chunk_size: Read size while streaming a response
            temp_dir: Directory for downloaded installers (system default if None)
        """
        self.logger = logging.getLogger(__name__)
        self.opener = opener or urllib.request.urlopen
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.temp_dir = Path(temp_dir) if temp_dir else None

    def fetch_file(self, url: str, destination: Path, sha256: Optional[str] = None) -> Path:
        """
        Download a file verbatim to a destination path.

        The body is streamed to a hidden sibling file and renamed into place
        only once complete, so an interrupted download never leaves a file
        under the final name.

        Args:
            url: Source URL
            destination: Final file path
            sha256: Optional expected digest

        Returns:
            The destination path
        """
        destination = Path(destination)
        self._ensure_dir(destination.parent)
        partial = destination.with_name(f".{destination.name}.part")

        try:
            digest = self._download(url, partial)
            self._verify(url, sha256, digest)
            os.replace(partial, destination)
        except OSError as e:
            raise InstallIOError(f"Cannot move download into {destination}: {e}") from e
        finally:
            self._remove(partial)

        self.logger.info(f"Saved {url} to {destination}")
        return destination

    def fetch_archive(self, url: str, destination_dir: Path,
                      flatten: bool = True, sha256: Optional[str] = None,
                      binary_path: Optional[str] = None) -> Path:
        """
        Download an archive and unpack it into a directory.

        Args:
            url: Source URL of a zip or tar archive
            destination_dir: Directory receiving the archive contents
            flatten: Strip the archive's single top-level directory
            sha256: Optional expected digest of the archive
            binary_path: Executable path expected under destination_dir; the
                top-level directory is kept when it is part of this path

        Returns:
            The destination directory
        """
        destination_dir = Path(destination_dir)
        parent = destination_dir.parent
        self._ensure_dir(parent)

        archive_path = self._temp_file(parent, prefix=f".{destination_dir.name}.", suffix=".archive")
        try:
            staging = Path(tempfile.mkdtemp(prefix=f".{destination_dir.name}.", suffix=".staging", dir=parent))
        except OSError as e:
            self._remove(archive_path)
            raise InstallIOError(f"Cannot create staging directory in {parent}: {e}") from e

        try:
            digest = self._download(url, archive_path)
            self._verify(url, sha256, digest)
            self._extract(archive_path, staging)
            root = self._content_root(staging, binary_path) if flatten else staging
            self._move_into_place(root, destination_dir)
        finally:
            self._remove(archive_path)
            shutil.rmtree(staging, ignore_errors=True)

        self.logger.info(f"Extracted {url} into {destination_dir}")
        return destination_dir

    def run_installer(self, url: str, flags: List[str],
                      install_dir: Optional[Path] = None,
                      install_dir_flag: Optional[str] = None,
                      sha256: Optional[str] = None) -> None:
        """
        Download a self-installing executable and run it unattended.

        The downloaded installer is deleted whether or not it succeeds.

        Args:
            url: Source URL of the installer
            flags: Silent-mode flags passed to the installer
            install_dir: Directory the installer should install into
            install_dir_flag: Flag prefix for install_dir, appended last
            sha256: Optional expected digest
        """
        if self.temp_dir:
            self._ensure_dir(self.temp_dir)
        installer = self._temp_file(self.temp_dir, prefix="vidgrab-installer-", suffix=".exe")

        try:
            digest = self._download(url, installer)
            self._verify(url, sha256, digest)
            installer.chmod(0o755)

            command = build_installer_command(installer, flags, install_dir, install_dir_flag)
            self.logger.info(f"Running installer: {command}")
            try:
                completed = subprocess.run(command, capture_output=True)
            except OSError as e:
                raise InstallIOError(f"Cannot launch installer {installer}: {e}") from e

            if completed.returncode != 0:
                raise InstallerExitFailure(url, completed.returncode)
        finally:
            self._remove(installer)

    def _download(self, url: str, destination: Path) -> str:
        """Stream a response body into a file and return its SHA-256."""
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        self.logger.info(f"Downloading {url}")

        try:
            response = self.opener(request, timeout=self.timeout)
        except urllib.error.HTTPError as e:
            raise NetworkError(url, f"HTTP {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise NetworkError(url, str(e.reason)) from e
        except (OSError, ValueError, http.client.HTTPException) as e:
            raise NetworkError(url, str(e)) from e

        digest = hashlib.sha256()
        received = 0
        with response:
            try:
                output = open(destination, "wb")
            except OSError as e:
                raise InstallIOError(f"Cannot create {destination}: {e}") from e

            with output:
                while True:
                    try:
                        chunk = response.read(self.chunk_size)
                    except (OSError, http.client.HTTPException) as e:
                        raise NetworkError(url, f"connection lost after {received} bytes: {e}") from e
                    if not chunk:
                        break
                    digest.update(chunk)
                    try:
                        output.write(chunk)
                    except OSError as e:
                        raise InstallIOError(f"Cannot write {destination}: {e}") from e
                    received += len(chunk)

        self.logger.debug(f"Received {received} bytes from {url}")
        return digest.hexdigest()

    def _verify(self, url: str, expected: Optional[str], actual: str) -> None:
        if expected and expected.lower() != actual:
            raise ChecksumMismatchError(url, expected, actual)

    def _extract(self, archive_path: Path, staging: Path) -> None:
        try:
            if zipfile.is_zipfile(archive_path):
                self._extract_zip(archive_path, staging)
            elif tarfile.is_tarfile(archive_path):
                self._extract_tar(archive_path, staging)
            else:
                raise ArchiveFormatError(f"{archive_path.name} is not a zip or tar archive")
        except (zipfile.BadZipFile, tarfile.TarError, zlib.error, EOFError) as e:
            raise ArchiveFormatError(f"Corrupt archive: {e}") from e
        except OSError as e:
            raise InstallIOError(f"Cannot extract archive into {staging}: {e}") from e

    def _extract_zip(self, archive_path: Path, staging: Path) -> None:
        root = staging.resolve()
        with zipfile.ZipFile(archive_path) as archive:
            bad = archive.testzip()
            if bad is not None:
                raise ArchiveFormatError(f"Corrupt archive member: {bad}")
            for member in archive.infolist():
                target = (root / member.filename).resolve()
                if target != root and root not in target.parents:
                    raise ArchiveFormatError(f"Archive member escapes target: {member.filename}")
                extracted = archive.extract(member, root)
                # Unix permission bits live in the high word
                mode = (member.external_attr >> 16) & 0o777
                if mode and not member.is_dir():
                    os.chmod(extracted, mode)

    def _extract_tar(self, archive_path: Path, staging: Path) -> None:
        root = staging.resolve()
        with tarfile.open(archive_path) as archive:
            if hasattr(tarfile, "data_filter"):
                archive.extractall(root, filter="data")
                return
            for member in archive.getmembers():
                target = (root / member.name).resolve()
                if target != root and root not in target.parents:
                    raise ArchiveFormatError(f"Archive member escapes target: {member.name}")
                if member.issym() or member.islnk():
                    raise ArchiveFormatError(f"Links are not allowed in tool archives: {member.name}")
            archive.extractall(root)

    def _content_root(self, staging: Path, binary_path: Optional[str] = None) -> Path:
        entries = list(staging.iterdir())
        if len(entries) == 1 and entries[0].is_dir():
            if binary_path and (staging / binary_path).exists():
                self.logger.debug(f"{entries[0].name}/ holds {binary_path}, keeping it")
                return staging
            return entries[0]
        self.logger.debug(f"Archive has {len(entries)} top-level entries, nothing to flatten")
        return staging

    def _move_into_place(self, root: Path, destination_dir: Path) -> None:
        try:
            if not destination_dir.exists():
                os.replace(root, destination_dir)
                return
            for entry in root.iterdir():
                target = destination_dir / entry.name
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                os.replace(entry, target)
        except OSError as e:
            raise InstallIOError(f"Cannot move extracted files into {destination_dir}: {e}") from e

    def _temp_file(self, directory: Optional[Path], prefix: str, suffix: str) -> Path:
        try:
            fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
        except OSError as e:
            raise InstallIOError(f"Cannot create temporary file: {e}") from e
        os.close(fd)
        return Path(name)

    def _ensure_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallIOError(f"Cannot create directory {directory}: {e}") from e

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove temporary file {path}: {e}")
