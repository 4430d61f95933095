"""Strategies that materialize a backup artifact from the live database."""

from .base import BackupStrategy
from .native import NativeToolStrategy
from .raw_copy import RawCopyStrategy

__all__ = ["BackupStrategy", "NativeToolStrategy", "RawCopyStrategy"]
