"""SQLite log of dataset loads."""
from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List


@dataclass(slots=True)
class LoadLogEntry:
    run_id: str
    dataset: str
    variant: str
    source: str
    kind: str
    record_count: int
    cached: bool
    reason: str | None
    elapsed_ms: float
    loaded_at: datetime
    version: str


class LoadLogStore:
    """Utility wrapper around SQLite for load logging."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self.path) as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS load_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_id TEXT NOT NULL,
                    dataset TEXT NOT NULL,
                    variant TEXT NOT NULL,
                    source TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    record_count INTEGER NOT NULL,
                    cached INTEGER NOT NULL,
                    reason TEXT,
                    elapsed_ms REAL NOT NULL,
                    loaded_at TEXT NOT NULL,
                    version TEXT NOT NULL
                )
                """
            )

    def record(self, entry: LoadLogEntry) -> None:
        with sqlite3.connect(self.path) as connection:
            connection.execute(
                """
                INSERT INTO load_log (
                    run_id,
                    dataset,
                    variant,
                    source,
                    kind,
                    record_count,
                    cached,
                    reason,
                    elapsed_ms,
                    loaded_at,
                    version
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.run_id,
                    entry.dataset,
                    entry.variant,
                    entry.source,
                    entry.kind,
                    entry.record_count,
                    int(entry.cached),
                    entry.reason,
                    entry.elapsed_ms,
                    entry.loaded_at.isoformat(),
                    entry.version,
                ),
            )

    def recent(self, limit: int = 20) -> List[LoadLogEntry]:
        """Return the latest *limit* entries, newest first."""

        with sqlite3.connect(self.path) as connection:
            connection.row_factory = sqlite3.Row
            rows = connection.execute(
                "SELECT * FROM load_log ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()
        return [
            LoadLogEntry(
                run_id=row["run_id"],
                dataset=row["dataset"],
                variant=row["variant"],
                source=row["source"],
                kind=row["kind"],
                record_count=row["record_count"],
                cached=bool(row["cached"]),
                reason=row["reason"],
                elapsed_ms=row["elapsed_ms"],
                loaded_at=datetime.fromisoformat(row["loaded_at"]),
                version=row["version"],
            )
            for row in rows
        ]


__all__ = ["LoadLogEntry", "LoadLogStore"]
