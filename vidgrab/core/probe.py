"""
Availability probe for external executables.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..models.installation import ProbeResult
from ..models.tool import ToolSpec
from .errors import ProbeUnavailable
from .search_path import SearchPathContext


class ToolProbe:
    """Checks whether a tool can be launched right now."""

    def __init__(self, context: SearchPathContext, timeout: Optional[float] = None):
        """
        Initialize the probe.

        Args:
            context: Search path used to resolve and spawn probe commands
            timeout: Optional limit for the probe process; a probe that launches
                but times out still counts as available
        """
        self.logger = logging.getLogger(__name__)
        self.context = context
        self.timeout = timeout

    def probe(self, spec: ToolSpec) -> ProbeResult:
        """
        Report whether the tool is currently invocable.

        The exit code of the probe command is ignored: version probes may exit
        non-zero, and only a launch failure proves the tool is absent.
        """
        location = self._spawn(spec)
        if location is not None:
            return ProbeResult(available=True, location=location)

        for candidate in spec.fallback_paths:
            if Path(candidate).exists():
                self.logger.info(f"{spec.name}: found at fallback location {candidate}")
                return ProbeResult(available=True, location=Path(candidate), via_fallback=True)

        self.logger.info(f"{spec.name}: '{spec.binary_name}' not found")
        return ProbeResult(available=False)

    def require(self, spec: ToolSpec) -> ProbeResult:
        """Probe and raise ProbeUnavailable when the tool is missing."""
        result = self.probe(spec)
        if not result.available:
            raise ProbeUnavailable(spec.name)
        return result

    def _spawn(self, spec: ToolSpec) -> Optional[Path]:
        executable = self.context.which(spec.binary_name)
        if executable is None:
            return None

        try:
            completed = subprocess.run(
                [str(executable), *spec.probe_args],
                capture_output=True,
                env=self.context.env(),
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            self.logger.warning(f"{spec.name}: probe timed out, treating as available")
            return executable
        except OSError as e:
            self.logger.debug(f"{spec.name}: failed to launch {executable}: {e}")
            return None

        self.logger.debug(f"{spec.name}: {executable} exited with {completed.returncode}")
        return executable
