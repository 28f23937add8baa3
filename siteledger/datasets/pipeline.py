"""The "load" stage: load every catalog dataset once and log where the records came from."""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List

from siteledger.core import register_stage
from siteledger.core.stage import StageContext
from siteledger.core.utils import package_version

from .loader import LIVE, DatasetLoader
from .storage import LoadLogEntry, LoadLogStore

logger = logging.getLogger(__name__)


async def _load_all(loader: DatasetLoader, run_id: str) -> List[LoadLogEntry]:
    version = package_version()
    entries: List[LoadLogEntry] = []
    for name in loader.catalog.names():
        started = time.perf_counter()
        result = await loader.load(name)
        entries.append(
            LoadLogEntry(
                run_id=run_id,
                dataset=name,
                variant=result.variant,
                source=result.source,
                kind=result.kind,
                record_count=result.record_count,
                cached=result.cached,
                reason=result.reason,
                elapsed_ms=(time.perf_counter() - started) * 1000,
                loaded_at=datetime.now(timezone.utc),
                version=version,
            )
        )
    return entries


def run_pipeline(context: StageContext, loader: DatasetLoader | None = None) -> List[LoadLogEntry]:
    """Load each dataset through *loader* and persist one log row per dataset."""

    context.settings.ensure_directories()
    if loader is None:
        loader = context.loader()
    store = LoadLogStore(context.settings.sqlite_path)

    entries = asyncio.run(_load_all(loader, context.run_id))
    for entry in entries:
        store.record(entry)
        logger.info(
            "Dataset %s: %d %s record(s) from %s",
            entry.dataset,
            entry.record_count,
            entry.kind,
            entry.source,
        )
    return entries


@register_stage("load", "Load every catalog dataset and record its provenance.")
def run(context: StageContext) -> None:
    logger.info("Loading datasets from %s", context.settings.data_dir)
    entries = run_pipeline(context)
    live = sum(1 for entry in entries if entry.kind == LIVE)
    logger.info(
        "Load completed: %d live, %d fallback dataset(s)",
        live,
        len(entries) - live,
    )
