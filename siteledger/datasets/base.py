"""Shared value types for dataset sources."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


@dataclass(slots=True, frozen=True)
class SourceStat:
    """Modification signature of a source (``st_mtime_ns`` for files)."""

    modified_at: int


@dataclass(slots=True)
class TabularContent:
    """Header row plus data rows, in source order."""

    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)
