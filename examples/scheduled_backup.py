"""Example of a nightly job: back up, verify, expire old backups and report."""

import asyncio
import logging
import sys

from records_dr import BackupConfig, BackupManager


async def nightly(manager: BackupManager) -> int:
    created = await manager.create_backup()
    if not created.success:
        print(f"Backup failed: {created.error}")
        return 1

    backup_id = created.metadata.id
    if not await manager.verify_backup(backup_id):
        print(f"Backup {backup_id} did not verify")
        return 1

    cleaned = await manager.cleanup_expired()
    for error in cleaned.errors:
        print(f"Cleanup error: {error}")

    stats = await manager.get_statistics()
    print(f"Backup {backup_id} verified; {stats.total_backups} backups, {stats.total_size:,} bytes")
    print(f"Expired and removed: {len(cleaned.deleted)}")
    return 0


async def drill(manager: BackupManager) -> int:
    result = await manager.self_test()
    for step in result.details:
        mark = "PASS" if step.passed else "FAIL"
        print(f"[{mark}] {step.test}" + (f": {step.error}" if step.error else ""))
    return 0 if result.success else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    manager = BackupManager(BackupConfig.from_env())
    job = drill if "--drill" in sys.argv else nightly
    sys.exit(asyncio.run(job(manager)))
