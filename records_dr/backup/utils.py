"""Utility functions for backup/restore operations."""

import hashlib
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .._utils import logger
from .models import BackupMetadata

ARTIFACT_SUFFIX = ".db"
METADATA_SUFFIX = ".json"


def compute_checksum(file_path: Path) -> str:
    """Compute SHA-256 checksum of file.

    Args:
        file_path: Path to file

    Returns:
        SHA-256 checksum as 64-character hex string
    """
    sha256 = hashlib.sha256()

    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)

    return sha256.hexdigest()


def verify_checksum(file_path: Path, expected_checksum: str) -> bool:
    """Verify file checksum.

    Args:
        file_path: Path to file
        expected_checksum: Expected hex digest

    Returns:
        True if checksum matches, False otherwise
    """
    return compute_checksum(file_path) == expected_checksum


def generate_backup_id(now: Optional[datetime] = None) -> str:
    """Generate backup ID with timestamp and random suffix.

    Returns:
        Backup ID in format: backup-YYYY-MM-DDTHH-MM-SS-ffffffZ-<hex6>
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return f"backup-{timestamp}-{secrets.token_hex(3)}"


def artifact_path(backup_dir: Path, backup_id: str) -> Path:
    return backup_dir / f"{backup_id}{ARTIFACT_SUFFIX}"


def metadata_path(backup_dir: Path, backup_id: str) -> Path:
    return backup_dir / f"{backup_id}{METADATA_SUFFIX}"


async def save_metadata(metadata: BackupMetadata, output_path: Path) -> None:
    """Save metadata sidecar as pretty-printed JSON.

    The JSON is written to ``<sidecar>.tmp`` and renamed over the sidecar, so
    readers only ever see the old or the new version in full.

    Args:
        metadata: Backup metadata
        output_path: Sidecar file path
    """
    staging = output_path.with_name(f"{output_path.name}.tmp")
    try:
        with open(staging, "w", encoding="utf-8") as f:
            f.write(metadata.to_sidecar_json())
        os.replace(staging, output_path)
    finally:
        if staging.exists():
            staging.unlink()

    logger.debug(f"Metadata saved: {output_path}")


async def load_metadata(metadata_file: Path) -> BackupMetadata:
    """Load metadata sidecar from file.

    Args:
        metadata_file: Sidecar file path

    Returns:
        Parsed BackupMetadata

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If the content is not valid metadata
    """
    with open(metadata_file, "rb") as f:
        metadata = BackupMetadata.model_validate_json(f.read())

    logger.debug(f"Metadata loaded: {metadata_file}")
    return metadata
