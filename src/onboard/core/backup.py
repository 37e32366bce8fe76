"""Backup and restore of shell configuration files.

Before setup touches any dotfile, the existing copy is saved under the backup
directory as ``<basename>.bak``. Teardown copies those records back over the
originals. Records are keyed by file name only, so two managed files must not
share a basename.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


class BackupManager:
    """Manages backup records for managed configuration files.

    Attributes:
        backup_dir (Path): Directory holding the ``.bak`` records.
        dry_run (bool): Log what would be copied without touching files.
    """

    def __init__(self, backup_dir: Path, dry_run: bool = False) -> None:
        """Initialize the backup manager.

        Args:
            backup_dir (Path): Directory holding the backup records.
            dry_run (bool): If True, only report what would be copied.
        """
        self.backup_dir = Path(backup_dir)
        self.dry_run = dry_run

    def record_path(self, file: Path) -> Path:
        """Return the backup record path for a file."""
        return self.backup_dir / f"{Path(file).name}{BACKUP_SUFFIX}"

    def has_backup(self, file: Path) -> bool:
        """Check whether a backup record exists for a file."""
        return self.record_path(file).is_file()

    def backup(self, files: Iterable[Path]) -> List[Path]:
        """Back up existing files.

        Files that do not exist are skipped. An existing record is never
        overwritten; the first backup is the one restored.

        Args:
            files: Files to back up.

        Returns:
            List[Path]: Backup records written.
        """
        if not self.dry_run:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Backing up existing configurations...")

        written: List[Path] = []
        for file in files:
            file = Path(file)
            if not file.is_file():
                logger.debug("Nothing to back up for %s", file)
                continue
            record = self.record_path(file)
            if record.is_file():
                logger.info("Backup of %s already exists, keeping it", file)
                continue
            if self.dry_run:
                logger.info("Would back up %s -> %s", file, record)
            else:
                shutil.copy2(file, record)
                logger.info("Backed up %s -> %s", file, record)
            written.append(record)
        return written

    def restore(self, files: Iterable[Path]) -> List[Path]:
        """Restore files from their backup records.

        Each record is deleted once it has been copied back.

        Args:
            files: Original file locations to restore.

        Returns:
            List[Path]: Files that were restored.
        """
        if not self.backup_dir.is_dir():
            logger.info("No backup found. Skipping restore.")
            return []

        logger.info("Restoring previous configurations...")
        restored: List[Path] = []
        for file in files:
            file = Path(file)
            record = self.record_path(file)
            if not record.is_file():
                logger.debug("No backup record for %s", file)
                continue
            if self.dry_run:
                logger.info("Would restore %s -> %s", record, file)
            else:
                file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(record, file)
                record.unlink()
                logger.info("Restored %s -> %s", record, file)
            restored.append(file)
        return restored


def scrub_lines(path: Path, needle: str, suffix: str = BACKUP_SUFFIX) -> bool:
    """Delete every line containing ``needle`` from a file.

    The untouched file is first copied next to itself with ``suffix``
    appended. Missing files are skipped.

    Returns:
        bool: True if any line was removed.
    """
    path = Path(path)
    if not path.is_file():
        return False

    # rc files are not guaranteed to be valid UTF-8
    marker = needle.encode()
    lines = path.read_bytes().splitlines(keepends=True)
    kept = [line for line in lines if marker not in line]
    shutil.copy2(path, path.with_name(path.name + suffix))
    if len(kept) == len(lines):
        return False

    path.write_bytes(b"".join(kept))
    logger.info("Removed %d line(s) mentioning %s from %s", len(lines) - len(kept), needle, path)
    return True
