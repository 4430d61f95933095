"""Tests for IntegrityVerifier."""

import json
from datetime import timedelta

import pytest

from records_dr.backup.journal import companion_path
from records_dr.backup.models import BackupStatus
from records_dr.backup.utils import compute_checksum


@pytest.mark.asyncio
async def test_verify_fresh_backup(manager, clock, backup_dir):
    created = await manager.create_backup()
    clock.advance(minutes=5)

    assert await manager.verify_backup(created.metadata.id) is True

    metadata = await manager.get_backup(created.metadata.id)
    assert metadata.status == BackupStatus.VERIFIED
    assert metadata.verified_at == clock.now
    assert metadata.checksum == created.metadata.checksum
    data = json.loads((backup_dir / f"{metadata.id}.json").read_text())
    assert "verifiedAt" in data


@pytest.mark.asyncio
async def test_verify_detects_tampering(manager, backup_dir):
    created = await manager.create_backup()
    artifact = backup_dir / f"{created.metadata.id}.db"
    with open(artifact, "ab") as f:
        f.write(b"tampered")

    assert await manager.verify_backup(created.metadata.id) is False

    metadata = await manager.get_backup(created.metadata.id)
    assert metadata.status == BackupStatus.COMPLETED
    assert metadata.verified_at is None


@pytest.mark.asyncio
async def test_verify_missing_artifact(manager, backup_dir):
    created = await manager.create_backup()
    (backup_dir / f"{created.metadata.id}.db").unlink()

    assert await manager.verify_backup(created.metadata.id) is False


@pytest.mark.asyncio
async def test_verify_missing_metadata(manager, backup_dir):
    created = await manager.create_backup()
    (backup_dir / f"{created.metadata.id}.json").unlink()

    assert await manager.verify_backup(created.metadata.id) is False


@pytest.mark.asyncio
async def test_verify_unknown_id(manager):
    assert await manager.verify_backup("backup-does-not-exist") is False


@pytest.mark.asyncio
async def test_verify_rejects_checksum_equal_garbage(manager, backup_dir):
    created = await manager.create_backup()
    backup_id = created.metadata.id
    artifact = backup_dir / f"{backup_id}.db"
    sidecar = backup_dir / f"{backup_id}.json"

    # Replace the artifact with non-database bytes and re-record a matching checksum
    artifact.write_bytes(b"this is definitely not an sqlite database file" * 20)
    data = json.loads(sidecar.read_text())
    data["checksum"] = compute_checksum(artifact)
    sidecar.write_text(json.dumps(data))

    assert await manager.verify_backup(backup_id) is False
    assert json.loads(sidecar.read_text())["status"] == "completed"


@pytest.mark.asyncio
async def test_verify_corrupt_metadata(manager, backup_dir):
    created = await manager.create_backup()
    (backup_dir / f"{created.metadata.id}.json").write_text("{broken")

    assert await manager.verify_backup(created.metadata.id) is False


@pytest.mark.asyncio
async def test_verify_does_not_touch_artifact(manager, backup_dir, clock):
    created = await manager.create_backup()
    artifact = backup_dir / f"{created.metadata.id}.db"
    before = artifact.read_bytes()

    clock.advance(days=1)
    assert await manager.verify_backup(created.metadata.id) is True

    assert artifact.read_bytes() == before
    assert sorted(p.name for p in backup_dir.iterdir()) == sorted(
        [f"{created.metadata.id}.db", f"{created.metadata.id}.json"]
    )
    assert (await manager.get_backup(created.metadata.id)).verified_at == created.metadata.timestamp + timedelta(days=1)


@pytest.mark.asyncio
async def test_verify_detects_tampered_companion(manager, db_path, backup_dir):
    companion_path(db_path, "-wal").write_bytes(b"wal at backup time")
    created = await manager.create_backup()
    companion_path(backup_dir / f"{created.metadata.id}.db", "-wal").write_bytes(b"TAMPERED")

    assert await manager.verify_backup(created.metadata.id) is False
    assert (await manager.get_backup(created.metadata.id)).status == BackupStatus.COMPLETED


@pytest.mark.asyncio
async def test_verify_detects_missing_companion(manager, db_path, backup_dir):
    companion_path(db_path, "-wal").write_bytes(b"wal at backup time")
    created = await manager.create_backup()
    companion_path(backup_dir / f"{created.metadata.id}.db", "-wal").unlink()

    assert await manager.verify_backup(created.metadata.id) is False


@pytest.mark.asyncio
async def test_verify_detects_unrecorded_companion(manager, backup_dir):
    created = await manager.create_backup()
    companion_path(backup_dir / f"{created.metadata.id}.db", "-shm").write_bytes(b"planted")

    assert await manager.verify_backup(created.metadata.id) is False


@pytest.mark.asyncio
async def test_verify_accepts_intact_companions(manager, db_path, backup_dir):
    companion_path(db_path, "-wal").write_bytes(b"wal at backup time")
    companion_path(db_path, "-shm").write_bytes(b"shm at backup time")
    created = await manager.create_backup()

    assert await manager.verify_backup(created.metadata.id) is True
