"""Create checksummed backup artifacts of the live database."""

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .._utils import logger, utc_now
from ..config import BackupConfig
from ..exceptions import BadRequestError, DatabaseError
from .journal import JournalCompanions
from .models import BackupMetadata, BackupResult, BackupStatus, BackupType
from .retention import RetentionPolicyEngine
from .strategies import BackupStrategy, NativeToolStrategy, RawCopyStrategy
from .utils import artifact_path, compute_checksum, generate_backup_id, metadata_path, save_metadata


def default_strategies(config: BackupConfig) -> List[BackupStrategy]:
    """Native hot backup first, raw file copy as the fallback."""
    return [NativeToolStrategy(config.native_tool), RawCopyStrategy()]


class BackupCreator:
    """Copy the live database into an artifact and write its metadata sidecar.

    The sidecar is only written once the artifact exists and its checksum is
    known, so a sidecar always refers to a complete artifact.
    """

    def __init__(
        self,
        config: BackupConfig,
        retention: RetentionPolicyEngine,
        strategies: Optional[Sequence[BackupStrategy]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.retention = retention
        self.strategies = list(strategies) if strategies is not None else default_strategies(config)
        self.clock = clock
        self.backup_dir = Path(config.backup_dir)

    async def create(
        self,
        backup_type: BackupType = BackupType.FULL,
        restored_from: Optional[str] = None,
    ) -> BackupResult:
        """Create a backup of the configured database.

        Never raises: failures are reported through ``BackupResult.error``.

        Args:
            backup_type: Backup type recorded in the metadata
            restored_from: Backup id whose restore triggered this snapshot

        Returns:
            BackupResult with the new metadata on success
        """
        start = time.monotonic()
        backup_id: Optional[str] = None

        try:
            source = self._check_source()
            self.backup_dir.mkdir(parents=True, exist_ok=True)

            timestamp = self.clock()
            backup_id = generate_backup_id(timestamp)
            artifact = artifact_path(self.backup_dir, backup_id)
            logger.info(f"Starting backup: {backup_id} ({BackupType(backup_type).value})")

            await self._materialize(source, artifact)

            if not artifact.exists():
                raise DatabaseError("Backup file was not created")
            size = artifact.stat().st_size
            if size == 0:
                raise DatabaseError("Backup file is empty")
            companion_checksums = JournalCompanions.discover(artifact).checksums()

            policy = self.retention.classify(timestamp)
            metadata = BackupMetadata(
                id=backup_id,
                timestamp=timestamp,
                backup_type=backup_type,
                size=size,
                checksum=compute_checksum(artifact),
                companion_checksums=companion_checksums or None,
                compressed=False,
                encrypted=False,
                database_path=str(source.resolve()),
                retention_policy=policy,
                expires_at=self.retention.expiration_for(policy, timestamp),
                status=BackupStatus.COMPLETED,
                restored_from=restored_from,
            )
            await save_metadata(metadata, metadata_path(self.backup_dir, backup_id))

            logger.info(f"Backup complete: {backup_id} ({size:,} bytes, {policy.value})")
            return BackupResult(success=True, metadata=metadata, duration=time.monotonic() - start)

        except Exception as e:
            logger.error(f"Backup failed: {e}")
            if backup_id is not None:
                self._discard_partial(backup_id)
            return BackupResult(success=False, error=str(e), duration=time.monotonic() - start)

    def _check_source(self) -> Path:
        if self.config.is_memory_database:
            raise BadRequestError("Cannot backup in-memory database")

        source = Path(self.config.database_path)
        if not source.is_file():
            raise BadRequestError(f"Database not found: {source}")

        size = source.stat().st_size
        if size > self.config.max_backup_size:
            raise BadRequestError(
                f"Database size ({size}) exceeds maximum backup size ({self.config.max_backup_size})"
            )
        return source

    async def _materialize(self, source: Path, artifact: Path) -> None:
        """Run the first available strategy that succeeds."""
        last_error: Optional[Exception] = None

        for strategy in self.strategies:
            if not strategy.is_available():
                logger.debug(f"Backup strategy unavailable: {strategy.name}")
                continue
            try:
                companions = await strategy.run(source, artifact)
            except Exception as e:
                logger.warning(f"Backup strategy {strategy.name} failed, trying next: {e}")
                last_error = e
                self._remove_artifact_files(artifact)
                continue

            if not strategy.crash_consistent:
                logger.warning(
                    f"Backup taken with {strategy.name}; artifact is not guaranteed crash-consistent"
                )
            if companions:
                logger.info(f"Artifact carries journal companions: {companions.suffixes}")
            return

        if last_error is not None:
            raise DatabaseError(f"All backup strategies failed: {last_error}")
        raise DatabaseError("No backup strategy available")

    def _discard_partial(self, backup_id: str) -> None:
        # A sidecar means the pair is complete; leave it alone
        if metadata_path(self.backup_dir, backup_id).exists():
            return
        self._remove_artifact_files(artifact_path(self.backup_dir, backup_id))

    @staticmethod
    def _remove_artifact_files(artifact: Path) -> None:
        try:
            JournalCompanions.discover(artifact).remove()
            if artifact.exists():
                artifact.unlink()
        except OSError as e:
            logger.warning(f"Could not remove partial artifact {artifact.name}: {e}")
