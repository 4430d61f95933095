"""Common interface for backup strategies."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..journal import JournalCompanions


class BackupStrategy(ABC):
    """Copy a live database file into a backup artifact.

    ``crash_consistent`` states whether the produced artifact is guaranteed to
    be a consistent snapshot even while other processes write to the source.
    """

    name: str = "base"
    crash_consistent: bool = False

    @abstractmethod
    def is_available(self) -> bool:
        """Capability probe, evaluated at call time."""

    @abstractmethod
    async def run(self, source: Path, destination: Path) -> JournalCompanions:
        """Write the artifact to ``destination``.

        Returns:
            Journal companions written beside the artifact
        """
