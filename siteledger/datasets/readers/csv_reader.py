"""CSV reader."""
from __future__ import annotations

import csv
from pathlib import Path

from siteledger.datasets.base import TabularContent


def read_csv(path: Path, *, encoding: str | None = None) -> TabularContent:
    encoding = encoding or "utf-8-sig"
    with path.open("r", encoding=encoding, newline="") as handle:
        rows = list(csv.reader(handle))
    if not rows:
        return TabularContent(headers=[])
    headers = [cell.strip() for cell in rows[0]]
    return TabularContent(headers=headers, rows=[list(row) for row in rows[1:]])
