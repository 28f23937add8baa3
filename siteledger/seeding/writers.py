"""Write dataset records to workbooks the loader can read back."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)


def write_workbook(
    path: Path,
    headers: Sequence[str],
    records: Iterable[Mapping[str, Any]],
    *,
    sheet_title: str = "Data",
) -> int:
    """Write *records* under *headers* to *path* and return the row count."""

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook = Workbook(write_only=True)
    worksheet = workbook.create_sheet(sheet_title)
    for index, _ in enumerate(headers, start=1):
        worksheet.column_dimensions[get_column_letter(index)].width = 18
    worksheet.append(list(headers))
    count = 0
    for record in records:
        worksheet.append([record.get(header) for header in headers])
        count += 1
    workbook.save(path)
    logger.info("Wrote %d row(s) to %s", count, path)
    return count


__all__ = ["write_workbook"]
