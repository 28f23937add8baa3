from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pytest

from siteledger.core.stage import StageContext
from siteledger.datasets.base import SourceStat, TabularContent
from siteledger.datasets.errors import SourceNotFoundError
from siteledger.settings import Settings


class StubSource:
    """In-memory tabular source that counts reads."""

    def __init__(self) -> None:
        self.files: Dict[str, Tuple[int, TabularContent]] = {}
        self.reads: List[str] = []
        self.delay = 0.0

    def put(self, identifier: str, headers: Sequence[str], rows: Sequence[Sequence[Any]], mtime: int = 1) -> None:
        self.files[identifier] = (mtime, TabularContent(list(headers), [list(row) for row in rows]))

    def touch(self, identifier: str) -> None:
        mtime, content = self.files[identifier]
        self.files[identifier] = (mtime + 1, content)

    def stat(self, identifier: str) -> SourceStat:
        if identifier not in self.files:
            raise SourceNotFoundError(identifier)
        return SourceStat(modified_at=self.files[identifier][0])

    def read(self, identifier: str, *, worksheet: str | None = None) -> TabularContent:
        self.reads.append(identifier)
        if self.delay:
            time.sleep(self.delay)
        return self.files[identifier][1]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def stub_source() -> StubSource:
    return StubSource()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings = Settings(
        data_dir=tmp_path / "data",
        output_dir=tmp_path / "artifacts",
        sqlite_path=tmp_path / "siteledger.sqlite",
        catalog_path=tmp_path / "config" / "datasets.yaml",
        cache_ttl_ms=30000,
        max_cache_entries=5,
        load_timeout_s=None,
        large_seed_count=50,
        log_level="INFO",
    )
    settings.ensure_directories()
    return settings


@pytest.fixture
def stage_context(settings: Settings, tmp_path: Path) -> StageContext:
    """Create a temporary stage context for tests."""

    return StageContext(
        settings=settings,
        run_id="test-run",
        timestamp=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        workspace=tmp_path,
    )
