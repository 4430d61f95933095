"""Tests for backup utility functions."""

import hashlib
import json
import re
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from records_dr.backup.models import BackupMetadata, BackupStatus, BackupType, RetentionPolicy
from records_dr.backup.utils import (
    artifact_path,
    compute_checksum,
    generate_backup_id,
    load_metadata,
    metadata_path,
    save_metadata,
    verify_checksum,
)


def sample_metadata(**overrides) -> BackupMetadata:
    created = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)
    fields = dict(
        id="backup-test",
        timestamp=created,
        backup_type=BackupType.FULL,
        size=4096,
        checksum="a" * 64,
        database_path="/data/records.db",
        retention_policy=RetentionPolicy.DAILY,
        expires_at=created + timedelta(days=7),
        status=BackupStatus.COMPLETED,
    )
    fields.update(overrides)
    return BackupMetadata(**fields)


def test_compute_and_verify_checksum():
    """Test checksum computation and verification."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False) as f:
        f.write("Test content for checksum")
        filepath = Path(f.name)

    try:
        checksum = compute_checksum(filepath)
        assert re.fullmatch(r"[0-9a-f]{64}", checksum)
        assert checksum == hashlib.sha256(b"Test content for checksum").hexdigest()

        assert verify_checksum(filepath, checksum) is True

        filepath.write_text("Modified content")
        assert verify_checksum(filepath, checksum) is False

    finally:
        filepath.unlink()


def test_generate_backup_id():
    now = datetime(2024, 3, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    backup_id = generate_backup_id(now)

    assert backup_id.startswith("backup-2024-03-05T06-07-08-000009Z-")
    assert re.fullmatch(r"backup-[0-9T\-]+Z-[0-9a-f]{6}", backup_id)
    assert generate_backup_id(now) != backup_id


def test_artifact_and_metadata_paths(tmp_path):
    assert artifact_path(tmp_path, "b1") == tmp_path / "b1.db"
    assert metadata_path(tmp_path, "b1") == tmp_path / "b1.json"


@pytest.mark.asyncio
async def test_save_and_load_metadata(tmp_path):
    sidecar = tmp_path / "backup-test.json"
    metadata = sample_metadata()

    await save_metadata(metadata, sidecar)
    assert sidecar.exists()

    loaded = await load_metadata(sidecar)
    assert loaded == metadata


@pytest.mark.asyncio
async def test_sidecar_uses_camel_case_keys(tmp_path):
    sidecar = tmp_path / "backup-test.json"
    await save_metadata(sample_metadata(restored_from="backup-older"), sidecar)

    data = json.loads(sidecar.read_text())
    assert data["type"] == "full"
    assert data["databasePath"] == "/data/records.db"
    assert data["retentionPolicy"] == "daily"
    assert data["restoredFrom"] == "backup-older"
    assert datetime.fromisoformat(data["expiresAt"].replace("Z", "+00:00")).day == 9
    # Unset optionals are omitted
    assert "verifiedAt" not in data
    assert data["compressed"] is False
    assert data["encrypted"] is False


@pytest.mark.asyncio
async def test_load_metadata_accepts_naive_and_millisecond_dates(tmp_path):
    sidecar = tmp_path / "backup-js.json"
    sidecar.write_text(json.dumps({
        "id": "backup-js",
        "timestamp": "2024-01-02T12:00:00.000Z",
        "type": "snapshot",
        "size": 10,
        "checksum": "b" * 64,
        "compressed": False,
        "encrypted": False,
        "databasePath": "/data/records.db",
        "retentionPolicy": "daily",
        "expiresAt": "2024-01-09T12:00:00",
        "status": "verified",
        "verifiedAt": "2024-01-02T12:05:00.000Z",
    }))

    loaded = await load_metadata(sidecar)
    assert loaded.backup_type == BackupType.SNAPSHOT
    assert loaded.status == BackupStatus.VERIFIED
    assert loaded.expires_at.tzinfo is not None
    assert loaded.expires_at > loaded.timestamp


@pytest.mark.asyncio
async def test_load_metadata_rejects_garbage(tmp_path):
    sidecar = tmp_path / "broken.json"
    sidecar.write_text("{not json")

    with pytest.raises(ValidationError):
        await load_metadata(sidecar)


@pytest.mark.asyncio
async def test_save_metadata_replaces_whole_file(tmp_path):
    sidecar = tmp_path / "backup-test.json"
    await save_metadata(sample_metadata(), sidecar)

    await save_metadata(sample_metadata(status=BackupStatus.VERIFIED), sidecar)

    assert (await load_metadata(sidecar)).status == BackupStatus.VERIFIED
    assert sorted(p.name for p in tmp_path.iterdir()) == ["backup-test.json"]


@pytest.mark.asyncio
async def test_save_metadata_failure_keeps_previous_sidecar(tmp_path):
    sidecar = tmp_path / "backup-test.json"
    await save_metadata(sample_metadata(), sidecar)
    before = sidecar.read_bytes()

    with patch("records_dr.backup.utils.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            await save_metadata(sample_metadata(status=BackupStatus.VERIFIED), sidecar)

    assert sidecar.read_bytes() == before
    assert not (tmp_path / "backup-test.json.tmp").exists()
