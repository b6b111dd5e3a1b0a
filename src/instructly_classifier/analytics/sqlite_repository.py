"""SQLite-backed usage log repository."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from instructly_classifier.domain.interfaces import IUsageRepository
from instructly_classifier.domain.models import ModelTier, UsageRecord

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS ai_usage_logs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    model_tier TEXT NOT NULL,
    model_name TEXT NOT NULL,
    operation_type TEXT NOT NULL,
    input_tokens INTEGER NOT NULL,
    output_tokens INTEGER NOT NULL,
    cost_usd REAL NOT NULL,
    created_at REAL NOT NULL
);
"""

_CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_ai_usage_logs_user_created
ON ai_usage_logs (user_id, created_at);
"""

_INSERT_SQL = """
INSERT INTO ai_usage_logs (id, user_id, model_tier, model_name, operation_type, input_tokens, output_tokens, cost_usd, created_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
"""

_SUM_COST_SQL = """
SELECT COALESCE(SUM(cost_usd), 0.0)
FROM ai_usage_logs
WHERE user_id = ? AND created_at >= ?;
"""

_SELECT_BY_USER_SQL = """
SELECT id, user_id, model_tier, model_name, operation_type, input_tokens, output_tokens, cost_usd, created_at
FROM ai_usage_logs
WHERE user_id = ?
ORDER BY created_at ASC;
"""


class SQLiteUsageRepository(IUsageRepository):
    """Append-only usage log; blocking sqlite work runs in a worker thread."""

    def __init__(self, db_path: str | Path):
        self._db_path = str(db_path)
        self._ensure_schema()

    async def append_usage_record(self, record: UsageRecord) -> None:
        await asyncio.to_thread(self._insert, record)

    async def sum_cost(self, user_id: str, since: datetime) -> float:
        return await asyncio.to_thread(self._sum_cost, user_id, since)

    async def find_by_user(self, user_id: str) -> List[UsageRecord]:
        return await asyncio.to_thread(self._find_by_user, user_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _insert(self, record: UsageRecord) -> None:
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                _INSERT_SQL,
                (
                    record.id,
                    record.user_id,
                    record.model_tier.value,
                    record.model_name,
                    record.operation_type,
                    record.input_tokens,
                    record.output_tokens,
                    record.cost_usd,
                    _to_epoch(record.created_at),
                ),
            )
            conn.commit()

    def _sum_cost(self, user_id: str, since: datetime) -> float:
        with sqlite3.connect(self._db_path) as conn:
            row = conn.execute(_SUM_COST_SQL, (user_id, _to_epoch(since))).fetchone()
        return float(row[0] or 0.0)

    def _find_by_user(self, user_id: str) -> List[UsageRecord]:
        with sqlite3.connect(self._db_path) as conn:
            rows = conn.execute(_SELECT_BY_USER_SQL, (user_id,)).fetchall()
        return [self._row_to_record(row) for row in rows]

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(_CREATE_TABLE_SQL)
            conn.execute(_CREATE_INDEX_SQL)
            conn.commit()

    @staticmethod
    def _row_to_record(
        row: Tuple[str, str, str, str, str, int, int, float, float]
    ) -> UsageRecord:
        (
            id_,
            user_id,
            model_tier,
            model_name,
            operation_type,
            input_tokens,
            output_tokens,
            cost_usd,
            created_at,
        ) = row
        return UsageRecord(
            id=id_,
            user_id=user_id,
            model_tier=ModelTier(model_tier),
            model_name=model_name,
            operation_type=operation_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=cost_usd,
            created_at=datetime.fromtimestamp(created_at, tz=timezone.utc),
        )


def _to_epoch(value: datetime) -> float:
    # Naive datetimes are interpreted on the server-local clock.
    return value.timestamp()
