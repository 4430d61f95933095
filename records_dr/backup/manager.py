"""Backup and restore orchestration for the records database."""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .._utils import logger, utc_now
from ..config import BackupConfig
from .catalog import BackupCatalog
from .creator import BackupCreator
from .harness import DisasterRecoveryTestHarness
from .models import (
    BackupMetadata,
    BackupResult,
    BackupStats,
    BackupType,
    CleanupResult,
    DisasterRecoveryTestResult,
    RecoveryResult,
)
from .restore import PointInTimeRecovery, RestoreEngine
from .retention import RetentionPolicyEngine
from .strategies import BackupStrategy
from .verifier import IntegrityVerifier


class BackupManager:
    """Orchestrate backup, verification, retention and recovery operations.

    ``create_backup``, ``restore_backup``, ``restore_as_of``, ``cleanup_expired``,
    ``delete_backup`` and ``self_test`` are serialized by a per-instance lock.
    Separate processes sharing a backup directory still need an external
    scheduler to serialize them.
    """

    def __init__(
        self,
        config: BackupConfig,
        strategies: Optional[Sequence[BackupStrategy]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize backup manager.

        Args:
            config: Backup configuration
            strategies: Backup strategies in preference order (native tool, then raw copy by default)
            clock: Source of the current UTC time
        """
        self.config = config
        self.backup_dir = Path(config.backup_dir)
        self._lock = asyncio.Lock()

        if config.compression or config.encryption:
            logger.warning("Backup compression/encryption are not implemented; artifacts are stored as-is")

        self.retention = RetentionPolicyEngine(config.retention)
        self.creator = BackupCreator(config, self.retention, strategies=strategies, clock=clock)
        self.verifier = IntegrityVerifier(self.backup_dir, clock=clock)
        self.catalog = BackupCatalog(self.backup_dir, clock=clock)
        self.restore_engine = RestoreEngine(config, self.catalog, self.verifier, self.creator, clock=clock)
        self.pitr = PointInTimeRecovery(self.catalog, self.restore_engine)
        self.harness = DisasterRecoveryTestHarness(self.creator, self.verifier, self.catalog)

    async def create_backup(self, backup_type: BackupType = BackupType.FULL) -> BackupResult:
        async with self._lock:
            return await self.creator.create(backup_type)

    async def verify_backup(self, backup_id: str) -> bool:
        return await self.verifier.verify(backup_id)

    async def list_backups(self) -> List[BackupMetadata]:
        return await self.catalog.list()

    async def get_backup(self, backup_id: str) -> BackupMetadata:
        return await self.catalog.get(backup_id)

    async def get_backup_path(self, backup_id: str) -> Optional[Path]:
        return await self.catalog.get_backup_path(backup_id)

    async def get_statistics(self) -> BackupStats:
        return await self.catalog.stats()

    async def delete_backup(self, backup_id: str) -> bool:
        async with self._lock:
            return await self.catalog.delete(backup_id)

    async def cleanup_expired(self) -> CleanupResult:
        async with self._lock:
            return await self.catalog.cleanup()

    async def restore_backup(self, backup_id: str) -> RecoveryResult:
        async with self._lock:
            return await self.restore_engine.restore(backup_id)

    async def restore_as_of(self, target_time: datetime) -> RecoveryResult:
        async with self._lock:
            return await self.pitr.restore_as_of(target_time)

    async def self_test(self) -> DisasterRecoveryTestResult:
        async with self._lock:
            return await self.harness.self_test()
