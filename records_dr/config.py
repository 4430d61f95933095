"""Configuration management for records-dr."""

import os
from dataclasses import dataclass, field


MEMORY_DATABASE = ":memory:"


def _database_path_from_url(url: str) -> str:
    """Turn a ``file:`` database URL into a filesystem path."""
    if url == MEMORY_DATABASE:
        return url
    if url.startswith("file:"):
        return url[len("file:"):]
    return url


@dataclass(frozen=True)
class RetentionConfig:
    """How long each retention tier is kept, in tier units."""
    daily_days: int = 7
    weekly_weeks: int = 4
    monthly_months: int = 12
    yearly_years: int = 7

    @classmethod
    def from_env(cls) -> 'RetentionConfig':
        """Create config from environment variables."""
        return cls(
            daily_days=int(os.getenv("BACKUP_RETENTION_DAILY", "7")),
            weekly_weeks=int(os.getenv("BACKUP_RETENTION_WEEKLY", "4")),
            monthly_months=int(os.getenv("BACKUP_RETENTION_MONTHLY", "12")),
            yearly_years=int(os.getenv("BACKUP_RETENTION_YEARLY", "7"))
        )

    def __post_init__(self):
        """Validate configuration."""
        for name in ("daily_days", "weekly_weeks", "monthly_months", "yearly_years"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class BackupConfig:
    """Backup engine configuration."""
    database_path: str
    backup_dir: str = "./backups"
    retention: RetentionConfig = field(default_factory=RetentionConfig)
    max_backup_size: int = 500 * 1024 * 1024
    native_tool: str = "sqlite3"

    # Declared but not applied to artifacts
    compression: bool = False
    encryption: bool = False

    @classmethod
    def from_env(cls) -> 'BackupConfig':
        """Create config from environment variables."""
        return cls(
            database_path=_database_path_from_url(os.getenv("DATABASE_URL", "./data/records.db")),
            backup_dir=os.getenv("BACKUP_DIR", "./backups"),
            retention=RetentionConfig.from_env(),
            max_backup_size=int(os.getenv("BACKUP_MAX_SIZE", str(500 * 1024 * 1024))),
            native_tool=os.getenv("BACKUP_NATIVE_TOOL", "sqlite3"),
            compression=os.getenv("BACKUP_COMPRESSION", "false").lower() == "true",
            encryption=os.getenv("BACKUP_ENCRYPTION", "false").lower() == "true"
        )

    def __post_init__(self):
        """Validate configuration."""
        if not self.database_path:
            raise ValueError("database_path must not be empty")
        if not self.backup_dir:
            raise ValueError("backup_dir must not be empty")
        if self.max_backup_size <= 0:
            raise ValueError(f"max_backup_size must be positive, got {self.max_backup_size}")

    @property
    def is_memory_database(self) -> bool:
        return self.database_path == MEMORY_DATABASE
