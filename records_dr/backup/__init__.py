"""Backup, integrity verification and disaster recovery for the records database."""

from .catalog import BackupCatalog
from .creator import BackupCreator
from .harness import DisasterRecoveryTestHarness
from .journal import JournalCompanions
from .manager import BackupManager
from .models import (
    BackupMetadata,
    BackupResult,
    BackupStats,
    BackupStatus,
    BackupType,
    CleanupResult,
    DisasterRecoveryTestResult,
    RecoveryResult,
    RetentionPolicy,
    SelfTestStep,
)
from .restore import PointInTimeRecovery, RestoreEngine
from .retention import RetentionPolicyEngine
from .verifier import IntegrityVerifier

__all__ = [
    "BackupCatalog",
    "BackupCreator",
    "BackupManager",
    "DisasterRecoveryTestHarness",
    "IntegrityVerifier",
    "JournalCompanions",
    "PointInTimeRecovery",
    "RestoreEngine",
    "RetentionPolicyEngine",
    "BackupMetadata",
    "BackupResult",
    "BackupStats",
    "BackupStatus",
    "BackupType",
    "CleanupResult",
    "DisasterRecoveryTestResult",
    "RecoveryResult",
    "RetentionPolicy",
    "SelfTestStep",
]
