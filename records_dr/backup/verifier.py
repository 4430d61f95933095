"""Re-hash and sanity-open stored backup artifacts."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Callable
from urllib.parse import quote

from .._utils import logger, utc_now
from .journal import JournalCompanions
from .models import BackupStatus
from .utils import artifact_path, compute_checksum, load_metadata, metadata_path, save_metadata


def open_database_readonly(path: Path) -> bool:
    """Open ``path`` as an SQLite database without modifying it and read its schema.

    Returns:
        True if the file is a readable SQLite database
    """
    uri = f"file:{quote(path.resolve().as_posix())}?mode=ro&immutable=1"
    try:
        conn = sqlite3.connect(uri, uri=True)
        try:
            conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning(f"Structural check failed for {path.name}: {e}")
        return False
    return True


class IntegrityVerifier:
    """Confirm an artifact still matches its recorded checksum and opens as a database."""

    def __init__(self, backup_dir: Path, clock: Callable[[], datetime] = utc_now):
        self.backup_dir = Path(backup_dir)
        self.clock = clock

    async def verify(self, backup_id: str) -> bool:
        """Verify a backup and promote its status to ``verified``.

        Never raises; any failure yields False and leaves the sidecar untouched.
        """
        try:
            sidecar = metadata_path(self.backup_dir, backup_id)
            artifact = artifact_path(self.backup_dir, backup_id)
            if not sidecar.exists() or not artifact.exists():
                logger.warning(f"Cannot verify {backup_id}: artifact or metadata missing")
                return False

            metadata = await load_metadata(sidecar)

            actual = compute_checksum(artifact)
            if actual != metadata.checksum:
                logger.warning(
                    f"Checksum mismatch for {backup_id}! Expected: {metadata.checksum}, Got: {actual}"
                )
                return False

            recorded = metadata.companion_checksums or {}
            present = JournalCompanions.discover(artifact).checksums()
            if present != recorded:
                logger.warning(
                    f"Journal companions of {backup_id} do not match metadata! "
                    f"Expected: {sorted(recorded)}, Got: {sorted(present)}"
                )
                return False

            if not open_database_readonly(artifact):
                return False

            verified = metadata.model_copy(
                update={"status": BackupStatus.VERIFIED, "verified_at": self.clock()}
            )
            await save_metadata(verified, sidecar)

            logger.info(f"Backup verified: {backup_id}")
            return True

        except Exception as e:
            logger.error(f"Verification of {backup_id} failed: {e}")
            return False
