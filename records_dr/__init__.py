"""Backup and disaster-recovery engine for the records-request tracker database."""

from .config import BackupConfig, RetentionConfig
from .backup import BackupManager

__version__ = "0.3.0"
__author__ = "Records DR Team"
__url__ = "https://github.com/records-dr/records-dr"

__all__ = ["BackupConfig", "RetentionConfig", "BackupManager"]
