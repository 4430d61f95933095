"""Restore the live database from a verified backup artifact."""

import os
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .._utils import ensure_utc, logger, utc_now
from ..config import BackupConfig
from ..exceptions import BadRequestError, DatabaseError, NotFoundError
from .catalog import BackupCatalog
from .creator import BackupCreator
from .journal import JournalCompanions
from .models import BackupType, RecoveryResult
from .utils import artifact_path, metadata_path
from .verifier import IntegrityVerifier


class RestoreEngine:
    """Overwrite the live database (and its journal companions) from an artifact.

    The artifact is re-verified first, and a ``snapshot`` backup of the
    current live database is attempted before anything is overwritten.
    """

    def __init__(
        self,
        config: BackupConfig,
        catalog: BackupCatalog,
        verifier: IntegrityVerifier,
        creator: BackupCreator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.catalog = catalog
        self.verifier = verifier
        self.creator = creator
        self.clock = clock
        self.backup_dir = Path(config.backup_dir)

    async def restore(self, backup_id: str) -> RecoveryResult:
        """Restore from backup.

        Args:
            backup_id: Backup ID to restore

        Returns:
            RecoveryResult; never raises
        """
        start = time.monotonic()

        try:
            artifact = artifact_path(self.backup_dir, backup_id)
            if not artifact.exists() or not metadata_path(self.backup_dir, backup_id).exists():
                raise NotFoundError(f"Backup not found: {backup_id}")

            if self.config.is_memory_database:
                raise BadRequestError("Cannot restore into in-memory database")

            if not await self.verifier.verify(backup_id):
                raise DatabaseError(f"Backup verification failed: {backup_id}")

            metadata = await self.catalog.get(backup_id)
            target = Path(self.config.database_path)
            logger.info(f"Starting restore: {backup_id} -> {target}")

            safety_backup_id = await self._take_safety_snapshot(backup_id)

            self._replace_database(artifact, target)
            companions = JournalCompanions.discover(artifact).reproduce_at(target)

            logger.info(f"Restore complete: {backup_id} (journal companions: {companions.suffixes})")
            return RecoveryResult(
                success=True,
                backup_id=metadata.id,
                restored_at=self.clock(),
                safety_backup_id=safety_backup_id,
                duration=time.monotonic() - start,
            )

        except Exception as e:
            logger.error(f"Restore of {backup_id} failed: {e}")
            return RecoveryResult(success=False, error=str(e), duration=time.monotonic() - start)

    async def _take_safety_snapshot(self, backup_id: str) -> Optional[str]:
        # Best effort: restoring over a missing or unreadable live database is allowed
        result = await self.creator.create(BackupType.SNAPSHOT, restored_from=backup_id)
        if not result.success or result.metadata is None:
            logger.warning(f"Could not create pre-restore safety snapshot: {result.error}")
            return None
        logger.info(f"Pre-restore safety snapshot: {result.metadata.id}")
        return result.metadata.id

    @staticmethod
    def _replace_database(artifact: Path, target: Path) -> None:
        """Swap the artifact bytes into place with a same-directory rename."""
        target.parent.mkdir(parents=True, exist_ok=True)
        staging = target.with_name(f"{target.name}.restore-tmp")
        try:
            shutil.copyfile(artifact, staging)
            os.replace(staging, target)
        finally:
            if staging.exists():
                staging.unlink()


class PointInTimeRecovery:
    """Restore the most recent backup taken at or before a given instant."""

    def __init__(self, catalog: BackupCatalog, restore_engine: RestoreEngine):
        self.catalog = catalog
        self.restore_engine = restore_engine

    async def select(self, target_time: datetime):
        """Return the newest backup with ``timestamp <= target_time``."""
        target_time = ensure_utc(target_time)
        eligible = [b for b in await self.catalog.list() if b.timestamp <= target_time]
        if not eligible:
            raise NotFoundError(f"No backup found before {target_time.isoformat()}")
        return max(eligible, key=lambda b: b.timestamp)

    async def restore_as_of(self, target_time: datetime) -> RecoveryResult:
        start = time.monotonic()
        try:
            candidate = await self.select(target_time)
        except Exception as e:
            logger.error(f"Point-in-time recovery failed: {e}")
            return RecoveryResult(success=False, error=str(e), duration=time.monotonic() - start)

        logger.info(f"Point-in-time recovery to {target_time.isoformat()} using {candidate.id}")
        return await self.restore_engine.restore(candidate.id)
