"""Test utilities for records-dr tests."""
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path


class FakeClock:
    """Settable clock injected in place of the real UTC time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_database(path: Path, rows: int = 1) -> Path:
    """Create a small SQLite database with a ``requests`` table."""
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE requests (id INTEGER PRIMARY KEY, title TEXT)")
    conn.executemany(
        "INSERT INTO requests (id, title) VALUES (?, ?)",
        [(i, f"request {i}") for i in range(1, rows + 1)],
    )
    conn.commit()
    conn.close()
    return path


def count_rows(path: Path) -> int:
    conn = sqlite3.connect(path)
    try:
        return conn.execute("SELECT COUNT(*) FROM requests").fetchone()[0]
    finally:
        conn.close()


def delete_all_rows(path: Path) -> None:
    conn = sqlite3.connect(path)
    conn.execute("DELETE FROM requests")
    conn.commit()
    conn.close()


def replace_rows(path: Path, rows: int) -> None:
    """Reset ``requests`` so it holds exactly ``rows`` rows."""
    conn = sqlite3.connect(path)
    conn.execute("DELETE FROM requests")
    conn.executemany(
        "INSERT INTO requests (id, title) VALUES (?, ?)",
        [(i, f"request {i}") for i in range(1, rows + 1)],
    )
    conn.commit()
    conn.close()
