"""End-to-end self-test of the backup pipeline."""

from typing import Awaitable, Callable, List

from .._utils import logger
from .catalog import BackupCatalog
from .creator import BackupCreator
from .models import BackupType, DisasterRecoveryTestResult, SelfTestStep
from .verifier import IntegrityVerifier


class DisasterRecoveryTestHarness:
    """Run create, verify, list and stats against the real backup directory.

    Steps after creation run even if an earlier one failed. If creation
    itself fails there is nothing to check and only that step is reported.
    """

    def __init__(self, creator: BackupCreator, verifier: IntegrityVerifier, catalog: BackupCatalog):
        self.creator = creator
        self.verifier = verifier
        self.catalog = catalog

    async def self_test(self) -> DisasterRecoveryTestResult:
        details: List[SelfTestStep] = []

        created = await self.creator.create(BackupType.SNAPSHOT)
        details.append(SelfTestStep(test="Create backup", passed=created.success, error=created.error))
        if not created.success or created.metadata is None:
            logger.error(f"DR self-test aborted: {created.error}")
            return DisasterRecoveryTestResult(success=False, tests_run=1, tests_passed=0, details=details)

        backup_id = created.metadata.id

        async def verify() -> bool:
            return await self.verifier.verify(backup_id)

        async def listed() -> bool:
            return any(b.id == backup_id for b in await self.catalog.list())

        async def counted() -> bool:
            return (await self.catalog.stats()).total_backups > 0

        details.append(await self._run_step("Verify backup integrity", verify))
        details.append(await self._run_step("List backups", listed))
        details.append(await self._run_step("Get backup statistics", counted))

        passed = sum(1 for d in details if d.passed)
        result = DisasterRecoveryTestResult(
            success=passed == len(details),
            tests_run=len(details),
            tests_passed=passed,
            details=details,
        )
        logger.info(f"DR self-test: {passed}/{len(details)} passed")
        return result

    @staticmethod
    async def _run_step(name: str, check: Callable[[], Awaitable[bool]]) -> SelfTestStep:
        try:
            return SelfTestStep(test=name, passed=await check())
        except Exception as e:
            logger.warning(f"DR self-test step '{name}' raised: {e}")
            return SelfTestStep(test=name, passed=False, error=str(e))
