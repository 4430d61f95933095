"""Global pytest configuration and fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from records_dr.backup.manager import BackupManager
from records_dr.backup.strategies import RawCopyStrategy
from records_dr.config import BackupConfig
from tests.utils import FakeClock, make_database


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return make_database(tmp_path / "records.db", rows=3)


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    return tmp_path / "backups"


@pytest.fixture
def clock() -> FakeClock:
    # A Tuesday, so backups land in the daily tier
    return FakeClock(datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def config(db_path: Path, backup_dir: Path) -> BackupConfig:
    return BackupConfig(database_path=str(db_path), backup_dir=str(backup_dir))


@pytest.fixture
def manager(config: BackupConfig, clock: FakeClock) -> BackupManager:
    """BackupManager using plain file copies so tests do not depend on the sqlite3 CLI."""
    return BackupManager(config, strategies=[RawCopyStrategy()], clock=clock)
