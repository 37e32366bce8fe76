"""Idempotent installer.

The installer walks an ordered list of resources. Setup installs whatever is
missing and aborts on the first failure. Teardown restores backed-up files
and then removes resources in reverse order, logging failures and carrying
on. Test re-runs the presence checks and reports what is missing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .backup import BackupManager
from .errors import OnboardError
from .resources import Resource

logger = logging.getLogger(__name__)


@dataclass
class TestReport:
    """Outcome of re-running presence checks."""

    __test__ = False

    profile: str
    checks: List[Tuple[str, bool]] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        """Names of resources that are not present."""
        return [name for name, present in self.checks if not present]

    @property
    def ok(self) -> bool:
        """True iff every checked resource is present."""
        return not self.missing


class Installer:
    """Runs setup, teardown and test over a fixed resource list.

    Attributes:
        name (str): Profile name used in log lines.
        resources (List[Resource]): Resources in install order.
        backup (Optional[BackupManager]): Backs up ``managed_files`` before
            setup and restores them on teardown.
        managed_files (List[Path]): Files covered by backup and restore.
        dry_run (bool): Log actions without performing them.
    """

    def __init__(
        self,
        name: str,
        resources: Sequence[Resource],
        backup: Optional[BackupManager] = None,
        managed_files: Sequence[Path] = (),
        dry_run: bool = False,
    ) -> None:
        """Initialize installer."""
        self.name = name
        self.resources: List[Resource] = list(resources)
        self.backup = backup
        self.managed_files: List[Path] = [Path(p) for p in managed_files]
        self.dry_run = dry_run

    def setup(self) -> List[str]:
        """Install every missing resource.

        Returns:
            List[str]: Names of resources that were installed (or would be,
                in dry-run mode).

        Raises:
            OnboardError: The first failed install; later resources are not
                attempted.
        """
        logger.info("Starting %s setup...", self.name)
        if self.backup is not None:
            self.backup.backup(self.managed_files)

        installed: List[str] = []
        for resource in self.resources:
            if resource.is_present():
                logger.info("✅ %s is already installed.", resource.label)
                continue

            is_step = resource.kind == "step"
            if self.dry_run:
                logger.info("Would %s %s", "run" if is_step else "install", resource.label)
                installed.append(resource.name)
                continue

            logger.info("📥 %s %s...", "Running" if is_step else "Installing", resource.label)
            resource.install()
            installed.append(resource.name)

        logger.info("Setup of %s completed successfully!", self.name)
        return installed

    def teardown(self) -> List[str]:
        """Restore backups, then remove resources in reverse order.

        Removal failures are logged and do not stop the run.

        Returns:
            List[str]: Names of resources whose removal was attempted.
        """
        logger.info("Starting %s teardown...", self.name)
        if self.backup is not None:
            self.backup.restore(self.managed_files)

        attempted: List[str] = []
        for resource in reversed(self.resources):
            if not resource.removable:
                continue
            if self.dry_run:
                logger.info("Would remove %s", resource.label)
                attempted.append(resource.name)
                continue

            logger.info("🗑 Removing %s...", resource.label)
            try:
                resource.remove()
            except (OnboardError, OSError, ValueError) as e:
                logger.warning("Could not remove %s: %s (best effort)", resource.label, e)
            attempted.append(resource.name)

        logger.info("Teardown of %s complete.", self.name)
        return attempted

    def test(self) -> TestReport:
        """Check that every verifiable resource is present."""
        logger.info("Testing %s installation...", self.name)
        report = TestReport(self.name)
        for resource in self.resources:
            if not resource.verifiable:
                continue
            present = resource.is_present()
            report.checks.append((resource.name, present))
            if present:
                logger.info("✅ %s", resource.label)
            else:
                logger.error("❌ %s is missing", resource.label)

        if report.ok:
            logger.info("✅ All %s resources are installed.", self.name)
        else:
            logger.error("❌ Missing: %s. Please check logs.", " ".join(report.missing))
        return report
