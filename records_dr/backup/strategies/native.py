"""Hot backup through the database engine's own command-line tool."""

import shutil
import subprocess
from pathlib import Path

from ..._utils import logger
from ...exceptions import DatabaseError
from ..journal import JournalCompanions
from .base import BackupStrategy


def dot_command_arg(value: str) -> str:
    """Quote ``value`` as one argument of an sqlite3 shell dot-command.

    The shell ends a single-quoted argument at the next quote with no escape,
    so the argument is double-quoted and its backslashes and double quotes
    are backslash-escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class NativeToolStrategy(BackupStrategy):
    """Run ``<tool> <source> '.backup "<destination>"'``.

    The SQLite online backup API produces a consistent snapshot even with
    concurrent writers, and writes a single self-contained file.
    """

    name = "native"
    crash_consistent = True

    def __init__(self, tool: str = "sqlite3"):
        self.tool = tool

    def is_available(self) -> bool:
        return shutil.which(self.tool) is not None

    async def run(self, source: Path, destination: Path) -> JournalCompanions:
        executable = shutil.which(self.tool)
        if executable is None:
            raise DatabaseError(f"Backup tool not found on PATH: {self.tool}")

        command = [executable, str(source), f".backup {dot_command_arg(destination.as_posix())}"]
        logger.debug(f"Running native backup: {command}")

        completed = subprocess.run(command, capture_output=True, text=True, check=False)
        if completed.returncode != 0:
            stderr = completed.stderr.strip() or f"exit code {completed.returncode}"
            raise DatabaseError(f"Native backup failed: {stderr}")
        if not destination.exists():
            raise DatabaseError("Native backup did not produce an artifact")

        return JournalCompanions.none(destination)
