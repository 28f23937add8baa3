"""Workbook reader backed by openpyxl."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List

from openpyxl import load_workbook

from siteledger.datasets.base import TabularContent
from siteledger.datasets.errors import MalformedSourceError


def read_xlsx(path: Path, *, worksheet: str | None = None) -> TabularContent:
    """Read the first (or the named) worksheet of the workbook at *path*."""

    workbook = load_workbook(path, data_only=True, read_only=True)
    try:
        if worksheet:
            if worksheet not in workbook.sheetnames:
                raise MalformedSourceError(f"Worksheet '{worksheet}' not found in {path.name}")
            sheet = workbook[worksheet]
        else:
            sheet = workbook.worksheets[0]
        rows: List[List[Any]] = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    if not rows:
        return TabularContent(headers=[])
    headers = [str(value).strip() if value is not None else "" for value in rows[0]]
    return TabularContent(headers=headers, rows=rows[1:])
