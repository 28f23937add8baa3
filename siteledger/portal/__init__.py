"""Portal-side helpers and the benchmark stage."""
from __future__ import annotations

import logging

from siteledger.core import register_stage
from siteledger.core.stage import StageContext

from .benchmark import BenchmarkReport, run_benchmark
from .queries import SiteStats, filter_sites, site_stats

logger = logging.getLogger(__name__)


@register_stage("benchmark", "Time cold and cached site loads plus in-memory filtering.")
def run(context: StageContext) -> None:
    loader = context.loader()
    report, path = run_benchmark(loader, context.output_path("benchmark"), context.run_id)
    speedup = report.speedup("large", "large-cached")
    if speedup is not None:
        logger.info("Cache speedup on the large dataset: %.1fx", speedup)
    logger.info("Benchmark report written to %s", path)


__all__ = ["BenchmarkReport", "SiteStats", "filter_sites", "run", "run_benchmark", "site_stats"]
