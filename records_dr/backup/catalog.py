"""Enumerate, summarize and expire backups from their metadata sidecars."""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from .._utils import logger, utc_now
from ..exceptions import NotFoundError
from .journal import JournalCompanions
from .models import BackupMetadata, BackupStats, CleanupResult
from .utils import METADATA_SUFFIX, artifact_path, load_metadata, metadata_path


class BackupCatalog:
    """View of the backup directory driven by sidecars, not artifact files.

    An artifact without a sidecar (left by a crash mid-creation) is invisible
    here.
    """

    def __init__(self, backup_dir: Path, clock: Callable[[], datetime] = utc_now):
        self.backup_dir = Path(backup_dir)
        self.clock = clock

    async def list(self) -> List[BackupMetadata]:
        """List all backups, newest first.

        Malformed sidecars are skipped.
        """
        if not self.backup_dir.exists():
            return []

        backups = []
        for sidecar in self.backup_dir.glob(f"*{METADATA_SUFFIX}"):
            try:
                backups.append(await load_metadata(sidecar))
            except (OSError, UnicodeDecodeError, ValidationError) as e:
                logger.warning(f"Skipping unreadable metadata {sidecar.name}: {e}")

        backups.sort(key=lambda b: b.timestamp, reverse=True)
        return backups

    async def get(self, backup_id: str) -> BackupMetadata:
        sidecar = metadata_path(self.backup_dir, backup_id)
        if not sidecar.exists():
            raise NotFoundError(f"Backup not found: {backup_id}")
        return await load_metadata(sidecar)

    async def get_backup_path(self, backup_id: str) -> Optional[Path]:
        """Get path to a backup artifact.

        Returns:
            Path to artifact or None if not found
        """
        artifact = artifact_path(self.backup_dir, backup_id)
        return artifact if artifact.exists() else None

    async def delete(self, backup_id: str) -> bool:
        """Delete a backup's artifact, journal companions and sidecar.

        The sidecar goes last, so a failed deletion stays listed and is
        retried by the next cleanup.

        Returns:
            True if deleted, False if not found
        """
        artifact = artifact_path(self.backup_dir, backup_id)
        sidecar = metadata_path(self.backup_dir, backup_id)
        if not artifact.exists() and not sidecar.exists():
            return False

        if artifact.exists():
            artifact.unlink()
        JournalCompanions.discover(artifact).remove()
        if sidecar.exists():
            sidecar.unlink()

        logger.info(f"Deleted backup: {backup_id}")
        return True

    async def stats(self) -> BackupStats:
        backups = await self.list()
        stats = BackupStats(total_backups=len(backups))
        if not backups:
            return stats

        for backup in backups:
            stats.total_size += backup.size
            policy = backup.retention_policy.value
            stats.by_retention_policy[policy] = stats.by_retention_policy.get(policy, 0) + 1
            status = backup.status.value
            stats.by_status[status] = stats.by_status.get(status, 0) + 1

        timestamps = [b.timestamp for b in backups]
        stats.oldest_backup = min(timestamps)
        stats.newest_backup = max(timestamps)

        now = self.clock()
        future_expirations = [b.expires_at for b in backups if b.expires_at > now]
        if future_expirations:
            stats.next_expiration = min(future_expirations)

        return stats

    async def cleanup(self) -> CleanupResult:
        """Delete every backup whose expiration is strictly in the past.

        A failure on one backup is recorded in ``errors`` and does not stop the
        rest of the batch.
        """
        result = CleanupResult()
        now = self.clock()

        for backup in await self.list():
            if backup.expires_at >= now:
                continue
            try:
                await self.delete(backup.id)
                result.deleted.append(backup.id)
            except Exception as e:
                logger.warning(f"Failed to delete expired backup {backup.id}: {e}")
                result.errors.append(f"{backup.id}: {e}")

        logger.info(f"Cleanup finished: {len(result.deleted)} deleted, {len(result.errors)} errors")
        return result
