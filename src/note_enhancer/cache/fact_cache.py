"""SQLite store of knowledge lookups shared across runs.

A row is keyed on the exact term and on the sentence limits its text was
truncated to, so changing those limits never serves text cut to the old
ones. Rows older than the TTL count as missing until purged.

Lookups run concurrently under ``asyncio.gather``; the coroutine methods
move the sqlite work onto a worker thread so the event loop never waits
on the database.
"""

from __future__ import annotations

import asyncio
import sqlite3
import time
from pathlib import Path

from note_enhancer.models.enhancement import FactSnippet

DEFAULT_DB_PATH = Path.home() / ".note-enhancer" / "facts.db"
DEFAULT_TTL_DAYS = 7


def limits_key(primary_sentences: int, secondary_sentences: int) -> str:
    """Cache key component for the truncation a snippet went through."""
    return f"{primary_sentences}/{secondary_sentences}"


class FactCache:
    """Positive knowledge lookups, one row per (term, limits)."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_days * 86400
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path), timeout=10)

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS facts (
                    term TEXT NOT NULL,
                    limits TEXT NOT NULL,
                    source TEXT NOT NULL,
                    text TEXT NOT NULL,
                    fetched_at REAL NOT NULL,
                    PRIMARY KEY (term, limits)
                )
            """)

    def _cutoff(self, now: float | None) -> float:
        return (time.time() if now is None else now) - self.ttl_seconds

    # --- Blocking API ---

    def lookup(self, term: str, limits: str, now: float | None = None) -> FactSnippet | None:
        """Return the stored snippet for term, or None when absent or expired."""
        term = term.strip()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT source, text FROM facts"
                " WHERE term = ? AND limits = ? AND fetched_at >= ?",
                (term, limits, self._cutoff(now)),
            ).fetchone()
        if row is None:
            return None
        source, text = row
        return FactSnippet(term=term, text=text, source=source)

    def store(self, snippet: FactSnippet, limits: str, now: float | None = None) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO facts
                   (term, limits, source, text, fetched_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    snippet.term.strip(),
                    limits,
                    snippet.source,
                    snippet.text,
                    time.time() if now is None else now,
                ),
            )

    def purge_expired(self, now: float | None = None) -> int:
        """Delete rows past the TTL. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM facts WHERE fetched_at < ?", (self._cutoff(now),))
            return cursor.rowcount

    def clear(self) -> int:
        """Delete every row. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM facts")
            return cursor.rowcount

    def stats(self, now: float | None = None) -> dict:
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM facts").fetchone()[0]
            expired = conn.execute(
                "SELECT COUNT(*) FROM facts WHERE fetched_at < ?", (self._cutoff(now),)
            ).fetchone()[0]
        return {"total": total, "expired": expired, "active": total - expired}

    # --- Event-loop API ---

    async def alookup(self, term: str, limits: str) -> FactSnippet | None:
        return await asyncio.to_thread(self.lookup, term, limits)

    async def astore(self, snippet: FactSnippet, limits: str) -> None:
        await asyncio.to_thread(self.store, snippet, limits)
