"""Plain file copy of the database and its journal companions."""

import shutil
from pathlib import Path

from ..._utils import logger
from ..journal import JournalCompanions
from .base import BackupStrategy


class RawCopyStrategy(BackupStrategy):
    """Copy the primary file plus whichever ``-wal``/``-shm`` files exist.

    NOT crash-consistent: the files are copied one after another, so a writer
    active during the copy can leave the artifact torn. Only used when no
    native backup tool is usable.
    """

    name = "raw_copy"
    crash_consistent = False

    def is_available(self) -> bool:
        return True

    async def run(self, source: Path, destination: Path) -> JournalCompanions:
        shutil.copy2(source, destination)
        companions = JournalCompanions.discover(source).copy_beside(destination)
        if companions:
            logger.debug(f"Copied journal companions: {companions.suffixes}")
        return companions
