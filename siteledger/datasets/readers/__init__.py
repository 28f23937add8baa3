"""Reader dispatch for tabular files."""
from __future__ import annotations

from pathlib import Path

from siteledger.datasets.base import TabularContent
from siteledger.datasets.errors import MalformedSourceError

WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


def read_table(path: Path, *, worksheet: str | None = None, encoding: str | None = None) -> TabularContent:
    """Read *path* into a header row plus data rows based on its suffix."""

    suffix = path.suffix.lower()
    if suffix in WORKBOOK_SUFFIXES:
        from .xlsx_reader import read_xlsx

        return read_xlsx(path, worksheet=worksheet)
    if suffix == ".csv":
        from .csv_reader import read_csv

        return read_csv(path, encoding=encoding)
    raise MalformedSourceError(f"Unsupported source format '{path.suffix}' for {path.name}")


__all__ = ["WORKBOOK_SUFFIXES", "read_table"]
