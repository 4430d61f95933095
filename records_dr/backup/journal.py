"""Write-ahead-log and shared-memory companions of an SQLite database file."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .._utils import logger
from .utils import compute_checksum

COMPANION_SUFFIXES = ("-wal", "-shm")


def companion_path(primary: Path, suffix: str) -> Path:
    return primary.with_name(primary.name + suffix)


@dataclass(frozen=True)
class JournalCompanions:
    """The journal companions present beside one primary database file.

    ``files`` maps a suffix (``-wal``/``-shm``) to the companion's path. A
    suffix missing from the mapping means that companion does not exist.
    """

    primary: Path
    files: Dict[str, Path] = field(default_factory=dict)

    @classmethod
    def discover(cls, primary: Path) -> "JournalCompanions":
        files = {}
        for suffix in COMPANION_SUFFIXES:
            path = companion_path(primary, suffix)
            if path.exists():
                files[suffix] = path
        return cls(primary=primary, files=files)

    @classmethod
    def none(cls, primary: Path) -> "JournalCompanions":
        return cls(primary=primary)

    @property
    def suffixes(self) -> List[str]:
        return sorted(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)

    def checksums(self) -> Dict[str, str]:
        """SHA-256 hex digest of each present companion, keyed by suffix."""
        return {suffix: compute_checksum(path) for suffix, path in self.files.items()}

    def copy_beside(self, destination: Path) -> "JournalCompanions":
        """Copy every present companion next to ``destination``."""
        copied = {}
        for suffix, source in self.files.items():
            target = companion_path(destination, suffix)
            shutil.copy2(source, target)
            copied[suffix] = target
        return JournalCompanions(primary=destination, files=copied)

    def reproduce_at(self, destination: Path) -> "JournalCompanions":
        """Make ``destination``'s companions match this set exactly.

        Present companions are copied over; companions absent here but
        present at the destination are deleted.
        """
        for suffix in COMPANION_SUFFIXES:
            target = companion_path(destination, suffix)
            if suffix in self.files:
                shutil.copy2(self.files[suffix], target)
            elif target.exists():
                target.unlink()
                logger.info(f"Removed stale journal companion: {target}")
        return JournalCompanions.discover(destination)

    def remove(self) -> None:
        for path in self.files.values():
            if path.exists():
                path.unlink()
