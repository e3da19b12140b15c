"""
Bootstrap orchestrator - probes each required tool and installs the missing ones.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from ..models.installation import InstallOutcome, InstallStatus
from ..models.tool import ToolSpec
from .errors import BootstrapError
from .installer import ToolInstaller
from .probe import ToolProbe


class BootstrapOrchestrator:
    """Makes every required tool available, one at a time, in catalog order."""

    def __init__(self,
                 specs: List[ToolSpec],
                 probe: ToolProbe,
                 installer: ToolInstaller):
        """
        Initialize the orchestrator.

        Args:
            specs: Tools to make available, in install order
            probe: Availability probe
            installer: Installer for missing tools
        """
        self.logger = logging.getLogger(__name__)
        self.specs = list(specs)
        self.probe = probe
        self.installer = installer

    def run(self) -> List[InstallOutcome]:
        """
        Probe and install each tool in order.

        Returns:
            One outcome per tool

        Raises:
            BootstrapError: On the first tool that cannot be installed
        """
        self.logger.info(f"Bootstrapping {len(self.specs)} tool(s)")
        start_time = datetime.now()
        outcomes: List[InstallOutcome] = []

        for spec in self.specs:
            outcome = self.ensure(spec)
            outcomes.append(outcome)
            if outcome.status == InstallStatus.FAILED:
                raise BootstrapError(spec.name, outcome.error)

        duration = (datetime.now() - start_time).total_seconds()
        self.logger.info(f"Bootstrap complete: {self.summarize(outcomes)} in {duration:.2f}s")
        return outcomes

    def ensure(self, spec: ToolSpec) -> InstallOutcome:
        """Make a single tool available."""
        result = self.probe.probe(spec)
        if result.available:
            if result.via_fallback and result.location is not None:
                self.installer.context.prepend(result.location.parent)
            self.logger.info(f"{spec.name}: available at {result.location}")
            return InstallOutcome.already_available(spec.name, result.location)

        self.logger.warning(f"{spec.name}: not found, installing")
        outcome = self.installer.install(spec)

        if outcome.success and not self.probe.probe(spec).available:
            self.logger.warning(f"{spec.name}: installed at {outcome.location} but the probe still fails")

        return outcome

    @staticmethod
    def summarize(outcomes: List[InstallOutcome]) -> Dict[str, Any]:
        return {
            "total_tools": len(outcomes),
            "already_available": sum(1 for o in outcomes if o.status == InstallStatus.ALREADY_AVAILABLE),
            "installed": sum(1 for o in outcomes if o.status == InstallStatus.INSTALLED),
            "failed": sum(1 for o in outcomes if o.status == InstallStatus.FAILED)
        }
