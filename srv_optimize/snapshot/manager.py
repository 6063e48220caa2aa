"""
Backup manager - timestamped copies of the critical config files.
"""

import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import BackupNotFoundError, BackupWriteError, NoBackupError
from ..logs import get_logger
from .models import BackupSnapshot, RestoreResult, SNAPSHOT_PREFIX, TIMESTAMP_FORMAT

logger = get_logger("backup")

# Log labels for the managed files
FILE_LABELS = {
    "grub.bak": "GRUB",
    "fstab.bak": "fstab",
    "sysctl.conf.bak": "sysctl.conf",
}


class BackupManager:
    """Creates and restores BackupSnapshots under a backup root."""

    def __init__(self, backup_root: str, files: Dict[str, str]):
        """
        Initialize backup manager.

        Args:
            backup_root: Directory that holds snapshot directories
            files: Backup file name -> host path, e.g. {"fstab.bak": "/etc/fstab"}
        """
        self.backup_root = Path(backup_root)
        self.files = dict(files)

    def _label(self, backup_name: str) -> str:
        return FILE_LABELS.get(backup_name, backup_name)

    def _new_directory(self, now: datetime) -> Path:
        base = self.backup_root / f"{SNAPSHOT_PREFIX}{now.strftime(TIMESTAMP_FORMAT)}"
        candidate = base
        suffix = 1
        while candidate.exists():
            candidate = base.with_name(f"{base.name}.{suffix}")
            suffix += 1
        return candidate

    # =========================================================================
    # Core Operations
    # =========================================================================

    def manual_backup(self) -> BackupSnapshot:
        """
        Copy every managed file into a fresh snapshot directory.

        A failed copy is logged and recorded; the remaining files are still
        copied.

        Returns:
            The created snapshot

        Raises:
            BackupWriteError: If the snapshot directory cannot be written
        """
        logger.info("Performing manual backup...")
        now = datetime.now()
        directory = self._new_directory(now)
        try:
            directory.mkdir(parents=True)
        except OSError as e:
            raise BackupWriteError(str(directory), e.strerror or str(e))

        snapshot = BackupSnapshot(path=str(directory), created_at=now.isoformat())

        for backup_name, source in self.files.items():
            try:
                shutil.copy2(source, directory / backup_name)
            except OSError as e:
                snapshot.failed.append(backup_name)
                logger.warning(f"{self._label(backup_name)} backup failed: {e}")
                continue
            snapshot.files[backup_name] = source
            logger.info(f"{self._label(backup_name)} backup successful.")

        try:
            snapshot.save()
        except OSError as e:
            raise BackupWriteError(str(directory), e.strerror or str(e))

        if not snapshot.complete:
            logger.warning(f"Partial backup: {len(snapshot.failed)} file(s) could not be copied.")
        logger.info(f"Manual backup completed. Files saved to {directory}.")
        return snapshot

    def restore_backups(self, snapshot: BackupSnapshot) -> RestoreResult:
        """
        Copy a snapshot's files back over the host files.

        Raises:
            BackupNotFoundError: If the snapshot directory no longer exists
        """
        logger.info("Restoring previous backups...")
        if not snapshot.exists():
            raise BackupNotFoundError(snapshot.path)

        result = RestoreResult(snapshot=snapshot.path)

        for backup_name in snapshot.failed:
            result.missing.append(backup_name)
            logger.warning(f"{self._label(backup_name)} was not backed up in {snapshot.path}; not restored.")

        for backup_name, target in snapshot.files.items():
            source = snapshot.directory / backup_name
            if not source.exists():
                result.missing.append(backup_name)
                logger.warning(f"{self._label(backup_name)} backup missing from {snapshot.path}.")
                continue
            try:
                shutil.copy2(source, target)
            except OSError as e:
                result.failed.append(backup_name)
                logger.warning(f"{self._label(backup_name)} restore failed: {e}")
                continue
            result.restored.append(target)
            logger.info(f"{self._label(backup_name)} restored.")

        if result.success:
            logger.info("Backups restored successfully. Reboot recommended.")
        else:
            expected = len(snapshot.files) + len(snapshot.failed)
            logger.warning(
                f"Restore incomplete: {len(result.restored)} of {expected} files restored. "
                "Reboot recommended."
            )
        return result

    # =========================================================================
    # Query Operations
    # =========================================================================

    def list_snapshots(self) -> List[BackupSnapshot]:
        """All snapshots on disk, oldest first."""
        if not self.backup_root.is_dir():
            return []

        snapshots = []
        for path in self.backup_root.iterdir():
            if not (path.is_dir() and path.name.startswith(SNAPSHOT_PREFIX)):
                continue
            try:
                snapshots.append(BackupSnapshot.load(path, default_files=self.files))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping backup {path}: unreadable manifest ({e}).")
        return sorted(snapshots, key=lambda s: (s.created_at, s.name))

    def latest(self) -> Optional[BackupSnapshot]:
        snapshots = self.list_snapshots()
        return snapshots[-1] if snapshots else None

    def resolve(self, snapshot: Optional[BackupSnapshot] = None) -> BackupSnapshot:
        """
        Snapshot to restore: the given one, else the newest on disk.

        Raises:
            NoBackupError: If there is none at all
        """
        if snapshot is not None:
            return snapshot

        latest = self.latest()
        if latest is None:
            raise NoBackupError(str(self.backup_root))

        logger.info(f"No backup taken in this session; using most recent backup {latest.path}.")
        return latest
