"""SQLite-backed per-caller quota state and usage log storage."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from note_enhancer.logging.models import FREE_TIER, CallerUsage, UsageLog

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".note-enhancer" / "usage.db"


def next_month_start(now: datetime) -> datetime:
    """Midnight on the first day of the month after ``now``."""
    if now.month == 12:
        return now.replace(year=now.year + 1, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return now.replace(month=now.month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)


class UsageStore:
    """SQLite-backed store for caller quotas and pipeline usage logs, in WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS caller_usage (
                    caller_id TEXT PRIMARY KEY,
                    tier TEXT NOT NULL DEFAULT 'free',
                    monthly_usage INTEGER NOT NULL DEFAULT 0,
                    usage_reset_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    caller_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    mode TEXT NOT NULL,
                    tone TEXT,
                    detected_intent TEXT,
                    input_words INTEGER NOT NULL DEFAULT 0,
                    context_used INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    knowledge_lookups INTEGER NOT NULL DEFAULT 0,
                    audio_seconds REAL NOT NULL DEFAULT 0.0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    # --- Quota state ---

    def ensure_caller(self, caller_id: str, tier: str = FREE_TIER) -> CallerUsage:
        """Create the caller row if missing and return its current state."""
        with self._connect() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO caller_usage (caller_id, tier) VALUES (?, ?)",
                (caller_id, tier),
            )
        return self.get_usage(caller_id)

    def get_usage(self, caller_id: str) -> CallerUsage | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT caller_id, tier, monthly_usage, usage_reset_at FROM caller_usage WHERE caller_id = ?",
                (caller_id,),
            ).fetchone()
        if row is None:
            return None
        return CallerUsage(
            caller_id=row[0],
            tier=row[1],
            monthly_usage=row[2],
            usage_reset_at=datetime.fromisoformat(row[3]) if row[3] else None,
        )

    def set_tier(self, caller_id: str, tier: str) -> None:
        self.ensure_caller(caller_id)
        with self._connect() as conn:
            conn.execute(
                "UPDATE caller_usage SET tier = ? WHERE caller_id = ?",
                (tier, caller_id),
            )

    def reset_if_due(self, caller_id: str, now: datetime | None = None) -> bool:
        """Zero the monthly counter when no reset is stored or the stored one has passed.

        Returns True when a reset happened.
        """
        usage = self.get_usage(caller_id)
        if usage is None:
            return False
        now = now or datetime.now()
        if usage.usage_reset_at is not None and usage.usage_reset_at > now:
            return False
        reset_at = next_month_start(now)
        with self._connect() as conn:
            conn.execute(
                "UPDATE caller_usage SET monthly_usage = 0, usage_reset_at = ? WHERE caller_id = ?",
                (reset_at.isoformat(), caller_id),
            )
        logger.info("Monthly usage reset for %s; next reset %s", caller_id, reset_at.date())
        return True

    def increment_usage(self, caller_id: str) -> int:
        """Add one to the caller's monthly counter and return the new value."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE caller_usage SET monthly_usage = monthly_usage + 1 WHERE caller_id = ?",
                (caller_id,),
            )
            row = conn.execute(
                "SELECT monthly_usage FROM caller_usage WHERE caller_id = ?",
                (caller_id,),
            ).fetchone()
        return row[0] if row else 0

    # --- Usage logs ---

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO usage_logs
                   (id, caller_id, timestamp, mode, tone, detected_intent,
                    input_words, context_used, elapsed_seconds, total_input_tokens,
                    total_output_tokens, knowledge_lookups, audio_seconds,
                    estimated_cost_usd, success, error_message)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    log.id,
                    log.caller_id,
                    log.timestamp.isoformat(),
                    log.mode,
                    log.tone,
                    log.detected_intent,
                    log.input_words,
                    1 if log.context_used else 0,
                    log.elapsed_seconds,
                    log.total_input_tokens,
                    log.total_output_tokens,
                    log.knowledge_lookups,
                    log.audio_seconds,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        caller_id: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs, optionally filtered by caller_id."""
        with self._connect() as conn:
            if caller_id is not None:
                rows = conn.execute(
                    "SELECT * FROM usage_logs WHERE caller_id = ? ORDER BY timestamp DESC LIMIT ?",
                    (caller_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM usage_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*) as total_runs,
                       SUM(total_input_tokens) as total_input,
                       SUM(total_output_tokens) as total_output,
                       SUM(knowledge_lookups) as total_lookups,
                       SUM(audio_seconds) as total_audio,
                       SUM(estimated_cost_usd) as total_cost,
                       SUM(CASE WHEN context_used = 1 THEN 1 ELSE 0 END) as context_runs,
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END) as success_count
                   FROM usage_logs
                   WHERE timestamp >= ?""",
                (month_start.isoformat(),),
            ).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "total_lookups": row[3] or 0,
            "total_audio_seconds": row[4] or 0.0,
            "total_cost_usd": row[5] or 0.0,
            "context_rate": (row[6] / row[0] * 100) if row[0] else 0.0,
            "success_rate": (row[7] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        return UsageLog(
            id=row[0],
            caller_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            mode=row[3],
            tone=row[4],
            detected_intent=row[5],
            input_words=row[6],
            context_used=bool(row[7]),
            elapsed_seconds=row[8],
            total_input_tokens=row[9],
            total_output_tokens=row[10],
            knowledge_lookups=row[11],
            audio_seconds=row[12],
            estimated_cost_usd=row[13],
            success=bool(row[14]),
            error_message=row[15],
        )
