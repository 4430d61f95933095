"""Data models for backup/restore operations."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .._utils import ensure_utc


class BackupType(str, Enum):
    """Type of backup."""

    FULL = "full"
    INCREMENTAL = "incremental"
    SNAPSHOT = "snapshot"


class BackupStatus(str, Enum):
    """Lifecycle status of a backup artifact."""

    PENDING = "pending"
    COMPLETED = "completed"
    VERIFIED = "verified"
    FAILED = "failed"


class RetentionPolicy(str, Enum):
    """Retention tier assigned to a backup at creation."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class _CamelModel(BaseModel):
    """Models serialized with camelCase keys in sidecars and API payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BackupMetadata(_CamelModel):
    """Metadata sidecar persisted next to each backup artifact."""

    id: str = Field(..., description="Unique backup identifier")
    timestamp: datetime = Field(..., description="Backup creation instant")
    backup_type: BackupType = Field(..., alias="type", description="Backup type")
    size: int = Field(..., description="Artifact size in bytes at creation")
    checksum: str = Field(..., description="SHA-256 hex digest of the artifact")
    companion_checksums: Optional[Dict[str, str]] = Field(
        default=None, description="SHA-256 hex digest of each journal companion, keyed by suffix"
    )
    compressed: bool = False
    encrypted: bool = False
    database_path: str = Field(..., description="Source database path")
    retention_policy: RetentionPolicy
    expires_at: datetime
    status: BackupStatus = BackupStatus.PENDING
    verified_at: Optional[datetime] = None
    restored_from: Optional[str] = Field(
        default=None, description="Backup id whose restore produced this safety snapshot"
    )

    @field_validator("timestamp", "expires_at", "verified_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    def to_sidecar_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class BackupResult(_CamelModel):
    """Outcome of a backup creation."""

    success: bool
    metadata: Optional[BackupMetadata] = None
    error: Optional[str] = None
    duration: float = Field(0.0, description="Elapsed seconds")


class RecoveryResult(_CamelModel):
    """Outcome of a restore or point-in-time recovery."""

    success: bool
    backup_id: Optional[str] = None
    restored_at: Optional[datetime] = None
    safety_backup_id: Optional[str] = None
    error: Optional[str] = None
    duration: float = Field(0.0, description="Elapsed seconds")


class BackupStats(_CamelModel):
    """Aggregate statistics over the backup catalog."""

    total_backups: int = 0
    total_size: int = 0
    by_retention_policy: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)
    oldest_backup: Optional[datetime] = None
    newest_backup: Optional[datetime] = None
    next_expiration: Optional[datetime] = None


class CleanupResult(_CamelModel):
    """Backups removed by retention cleanup, and per-entry failures."""

    deleted: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class SelfTestStep(_CamelModel):
    test: str
    passed: bool
    error: Optional[str] = None


class DisasterRecoveryTestResult(_CamelModel):
    """Report of a disaster-recovery self-test run."""

    success: bool
    tests_run: int
    tests_passed: int
    details: List[SelfTestStep] = Field(default_factory=list)
