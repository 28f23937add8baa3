"""Load-time probe: cold reads, cached reads and in-memory filtering."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List

from siteledger.datasets.loader import DatasetLoader

from .queries import filter_sites

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Timing:
    label: str
    kind: str
    records: int
    milliseconds: float


@dataclass(slots=True)
class BenchmarkReport:
    run_id: str
    timings: List[Timing] = field(default_factory=list)

    def speedup(self, cold: str, warm: str) -> float | None:
        lookup: Dict[str, Timing] = {timing.label: timing for timing in self.timings}
        if cold not in lookup or warm not in lookup or not lookup[warm].milliseconds:
            return None
        return lookup[cold].milliseconds / lookup[warm].milliseconds


async def _timed_load(loader: DatasetLoader, label: str, variant: str) -> tuple[Timing, list]:
    started = time.perf_counter()
    result = await loader.load("sites", variant)
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("%s: %d %s sites in %.1fms", label, result.record_count, result.kind, elapsed)
    return Timing(label, result.kind, result.record_count, elapsed), result.records


async def _probe(loader: DatasetLoader, report: BenchmarkReport) -> None:
    timing, _ = await _timed_load(loader, "default", "default")
    report.timings.append(timing)
    timing, large = await _timed_load(loader, "large", "large")
    report.timings.append(timing)
    timing, _ = await _timed_load(loader, "large-cached", "large")
    report.timings.append(timing)

    started = time.perf_counter()
    electricity = filter_sites(large, utility_type="electricity")
    report.timings.append(
        Timing("filter-electricity", "memory", len(electricity), (time.perf_counter() - started) * 1000)
    )
    started = time.perf_counter()
    london = filter_sites(large, search="london")
    report.timings.append(
        Timing("search-london", "memory", len(london), (time.perf_counter() - started) * 1000)
    )


def run_benchmark(loader: DatasetLoader, path: Path, run_id: str) -> tuple[BenchmarkReport, Path]:
    """Run the probe and write the JSON report to *path*."""

    report = BenchmarkReport(run_id=run_id)
    asyncio.run(_probe(loader, report))
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(report)
    payload["cache_speedup"] = report.speedup("large", "large-cached")
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return report, path


__all__ = ["BenchmarkReport", "Timing", "run_benchmark"]
