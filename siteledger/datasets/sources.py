"""Source providers and the file-change detector."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .base import SourceStat, TabularContent
from .errors import SourceNotFoundError
from .readers import read_table


class TabularSource(Protocol):
    """Anything that can report a modification signature and hand back rows."""

    def stat(self, identifier: str) -> SourceStat:
        """Return the current modification signature of *identifier*."""

    def read(self, identifier: str, *, worksheet: str | None = None) -> TabularContent:
        """Return the full tabular content of *identifier*."""


class FileTabularSource:
    """Workbook and CSV files on the local filesystem."""

    def stat(self, identifier: str) -> SourceStat:
        try:
            return SourceStat(modified_at=Path(identifier).stat().st_mtime_ns)
        except FileNotFoundError as exc:
            raise SourceNotFoundError(f"Dataset source not found: {identifier}") from exc

    def read(self, identifier: str, *, worksheet: str | None = None) -> TabularContent:
        path = Path(identifier)
        if not path.exists():
            raise SourceNotFoundError(f"Dataset source not found: {identifier}")
        return read_table(path, worksheet=worksheet)


class ChangeDetector:
    """Report whether a source changed by comparing modification signatures."""

    def __init__(self, source: TabularSource) -> None:
        self._source = source

    def signature(self, identifier: str) -> int:
        """Return the modification signature, or raise :class:`SourceNotFoundError`."""

        return self._source.stat(identifier).modified_at


__all__ = ["ChangeDetector", "FileTabularSource", "TabularSource"]
