"""
Explicit search-path context threaded through every child-process spawn.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Mapping, MutableMapping, Optional, Union


PATH_VAR = "PATH"


class SearchPathContext:
    """
    In-memory copy of the process environment with an additive search path.

    Directories are only ever prepended, never removed, so a directory
    registered once stays resolvable for the rest of the run.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the context.

        Args:
            environ: Environment to start from (defaults to a copy of os.environ)
        """
        self.logger = logging.getLogger(__name__)
        base = dict(os.environ if environ is None else environ)
        self._path_key = self._find_path_key(base)
        raw = base.pop(self._path_key, "")
        self._base_env: Dict[str, str] = base
        self._entries: List[str] = [p for p in raw.split(os.pathsep) if p]

    @staticmethod
    def _find_path_key(environ: Mapping[str, str]) -> str:
        # Windows environments may spell it "Path"
        for key in environ:
            if key.upper() == PATH_VAR:
                return key
        return PATH_VAR

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def prepend(self, directory: Union[str, Path]) -> None:
        """Make a directory the first place executables are looked up."""
        entry = str(directory)
        if self._entries and self._entries[0] == entry:
            return
        if entry in self._entries:
            self._entries.remove(entry)
        self._entries.insert(0, entry)
        self.logger.debug(f"Search path now starts with {entry}")

    def contains(self, directory: Union[str, Path]) -> bool:
        return str(directory) in self._entries

    def path_string(self) -> str:
        return os.pathsep.join(self._entries)

    def env(self) -> Dict[str, str]:
        """Environment for a child process spawned under this context."""
        child_env = dict(self._base_env)
        child_env[self._path_key] = self.path_string()
        return child_env

    def which(self, name: str) -> Optional[Path]:
        """Resolve an executable name against this search path."""
        found = shutil.which(name, path=self.path_string())
        return Path(found) if found else None

    def apply(self, environ: MutableMapping[str, str]) -> None:
        """Write the search path into a live environment mapping (process-local)."""
        environ[self._path_key] = self.path_string()

    def __repr__(self) -> str:
        return f"SearchPathContext(entries={len(self._entries)})"
