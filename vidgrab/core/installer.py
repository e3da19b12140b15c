"""
Tool installer: existence check, local seed copy, artifact placement and
search-path registration.
"""

import logging
import os
import shutil
import stat
from functools import singledispatchmethod
from pathlib import Path
from typing import Optional

from ..models.installation import InstallOutcome
from ..models.tool import (
    ArchiveArtifact,
    ExecutableArtifact,
    SilentInstallerArtifact,
    ToolSpec,
)
from .errors import ArchiveFormatError, InstallIOError, ToolError
from .fetcher import ToolFetcher
from .search_path import SearchPathContext


class ToolInstaller:
    """Makes a tool present at its install location and registers it for this run."""

    def __init__(self,
                 tools_root: Path,
                 context: SearchPathContext,
                 fetcher: Optional[ToolFetcher] = None,
                 seed_dir: Optional[Path] = None):
        """
        Initialize the installer.

        Args:
            tools_root: Per-user directory holding one subfolder per tool
            context: Search path receiving installed tool directories
            fetcher: Artifact fetcher
            seed_dir: Directory checked for a pre-seeded copy of each executable
        """
        self.logger = logging.getLogger(__name__)
        self.tools_root = Path(tools_root)
        self.context = context
        self.fetcher = fetcher or ToolFetcher()
        self.seed_dir = Path(seed_dir) if seed_dir else Path.cwd()

    def install(self, spec: ToolSpec) -> InstallOutcome:
        """
        Ensure a tool is installed.

        An existing executable at the target path short-circuits without any
        network access. Failures are reported in the outcome, never raised.
        """
        executable = spec.executable_path(self.tools_root)

        if executable.exists():
            self.logger.info(f"{spec.name}: already installed at {executable}")
            self.register(spec)
            return InstallOutcome.already_available(spec.name, executable)

        try:
            seed = self.seed_dir / spec.binary_name
            if seed.is_file():
                self.logger.info(f"{spec.name}: copying pre-seeded {seed} to {executable}")
                self._copy_seed(seed, executable)
            else:
                self.logger.info(f"{spec.name}: fetching {spec.artifact.kind} from {spec.url}")
                self.place(spec.artifact, spec)

            if not executable.exists():
                raise InstallIOError(f"{executable} missing after installation")
            self._mark_executable(executable)
        except ToolError as e:
            self.logger.error(f"{spec.name}: installation failed: {e}")
            return InstallOutcome.failed(spec.name, e)
        except OSError as e:
            self.logger.error(f"{spec.name}: installation failed: {e}")
            return InstallOutcome.failed(spec.name, InstallIOError(str(e)))

        self.register(spec)
        self.logger.info(f"{spec.name}: installed at {executable}")
        return InstallOutcome.installed(spec.name, executable)

    def register(self, spec: ToolSpec) -> Path:
        """Put the tool's executable directory on the search path."""
        bin_dir = spec.bin_dir(self.tools_root)
        self.context.prepend(bin_dir)
        return bin_dir

    @singledispatchmethod
    def place(self, artifact, spec: ToolSpec) -> None:
        """Fetch and place an artifact according to its kind."""
        raise TypeError(f"Unsupported artifact kind: {type(artifact).__name__}")

    @place.register
    def _(self, artifact: ExecutableArtifact, spec: ToolSpec) -> None:
        self.fetcher.fetch_file(spec.url, spec.executable_path(self.tools_root), sha256=spec.sha256)

    @place.register
    def _(self, artifact: ArchiveArtifact, spec: ToolSpec) -> None:
        target_dir = spec.target_dir(self.tools_root)
        fresh = not target_dir.exists()
        self.fetcher.fetch_archive(
            spec.url,
            target_dir,
            flatten=artifact.flatten,
            sha256=spec.sha256,
            binary_path=artifact.binary_path
        )
        if not spec.executable_path(self.tools_root).exists():
            if fresh:
                shutil.rmtree(target_dir, ignore_errors=True)
            raise ArchiveFormatError(f"Archive from {spec.url} does not contain {artifact.binary_path}")

    @place.register
    def _(self, artifact: SilentInstallerArtifact, spec: ToolSpec) -> None:
        self.fetcher.run_installer(
            spec.url,
            artifact.flags,
            install_dir=spec.target_dir(self.tools_root),
            install_dir_flag=artifact.install_dir_flag,
            sha256=spec.sha256
        )

    def _copy_seed(self, seed: Path, executable: Path) -> None:
        partial = executable.with_name(f".{executable.name}.part")
        try:
            executable.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(seed, partial)
            os.replace(partial, executable)
        except OSError as e:
            raise InstallIOError(f"Cannot copy {seed} to {executable}: {e}") from e
        finally:
            if partial.exists():
                partial.unlink()

    def _mark_executable(self, executable: Path) -> None:
        if os.name == "nt":
            return
        mode = executable.stat().st_mode
        executable.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
