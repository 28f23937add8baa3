"""Dataset loader: signature check, cache, parse and fallback.

Each :meth:`DatasetLoader.load` call runs the full sequence::

    resolve source -> check signature -> cache hit?  -> return cached records
                                      -> cache miss -> read + map -> cache -> return
    any read/parse failure --------------------------------------> fallback records

Fallback results are never cached, so the next successful read replaces them
without explicit invalidation. Entries are keyed by dataset and source file.
Concurrent loads of the same key share one in-flight task, and every caller
gets its own copy of the records.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List

from siteledger.settings import Settings

from .cache import DEFAULT_TTL_MS, CacheEntry, CacheStats, DatasetCache
from .catalog import DatasetCatalog
from .errors import CacheCorruptionError
from .fallback import FallbackRegistry
from .fields import DatasetDefinition, Record, RecordMapper
from .sources import ChangeDetector, FileTabularSource, TabularSource

logger = logging.getLogger(__name__)

LIVE = "live"
FALLBACK = "fallback"


@dataclass(slots=True)
class LoadResult:
    """Records for one dataset plus where they came from."""

    kind: str
    dataset: str
    variant: str
    source: str
    records: List[Record]
    reason: str | None = None
    cached: bool = False

    @property
    def is_live(self) -> bool:
        return self.kind == LIVE

    @property
    def record_count(self) -> int:
        return len(self.records)


class DatasetLoader:
    """Serve dataset records from a cache in front of tabular files."""

    def __init__(
        self,
        catalog: DatasetCatalog,
        data_dir: Path,
        *,
        cache: DatasetCache | None = None,
        source: TabularSource | None = None,
        fallback: FallbackRegistry | None = None,
        ttl_ms: float = DEFAULT_TTL_MS,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.catalog = catalog
        self.data_dir = Path(data_dir)
        self.cache = cache if cache is not None else DatasetCache()
        self.ttl_ms = ttl_ms
        self.timeout = timeout
        self._source = source or FileTabularSource()
        self._detector = ChangeDetector(self._source)
        self._fallback = fallback or FallbackRegistry(catalog)
        self._clock = clock
        self._mappers: Dict[str, RecordMapper] = {}
        self._inflight: Dict[str, asyncio.Future] = {}

    @classmethod
    def from_settings(cls, settings: Settings, catalog: DatasetCatalog) -> "DatasetLoader":
        return cls(
            catalog,
            settings.data_dir,
            cache=DatasetCache(settings.max_cache_entries),
            ttl_ms=settings.cache_ttl_ms,
            timeout=settings.load_timeout_s,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load(
        self, name: str, variant: str | None = None, *, timeout: float | None = None
    ) -> LoadResult:
        """Return records for dataset *name*; never raises on read or parse failures.

        Unknown dataset names raise :class:`KeyError`. *timeout* (seconds)
        overrides the loader default and bounds this caller's wait only: a
        caller that times out gets the fallback while a shared in-flight read
        carries on for everyone else. Each caller receives its own copy of the
        records.
        """

        definition = self.catalog.get(name)
        resolved_variant, filename = definition.resolve_variant(variant)
        identifier = str(self.data_dir / filename)
        key = self._cache_key(definition, identifier)
        limit = timeout if timeout is not None else self.timeout

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load_source(definition, identifier, key))
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight load of %s", key)

        try:
            if limit is None:
                result = await asyncio.shield(task)
            else:
                result = await asyncio.wait_for(asyncio.shield(task), limit)
        except asyncio.TimeoutError:
            return self._fallback_result(
                definition, resolved_variant, identifier, f"load timed out after {limit:g}s"
            )
        return replace(result, variant=resolved_variant, records=_copy_records(result.records))

    async def load_records(self, name: str, variant: str | None = None) -> List[Record]:
        """Plain record list, for callers that do not care about provenance."""

        return (await self.load(name, variant)).records

    def load_sync(self, name: str, variant: str | None = None) -> LoadResult:
        return asyncio.run(self.load(name, variant))

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Dataset cache cleared")

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _cache_key(definition: DatasetDefinition, identifier: str) -> str:
        key = f"{definition.name}:{identifier}"
        if definition.worksheet:
            return f"{key}#{definition.worksheet}"
        return key

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def _mapper(self, definition: DatasetDefinition) -> RecordMapper:
        mapper = self._mappers.get(definition.name)
        if mapper is None or mapper.fields != definition.fields:
            mapper = RecordMapper(definition.fields)
            self._mappers[definition.name] = mapper
        return mapper

    def _read(self, definition: DatasetDefinition, identifier: str) -> List[Record]:
        content = self._source.read(identifier, worksheet=definition.worksheet)
        return self._mapper(definition).map_rows(content)

    def _check_entry(self, entry: object, definition: DatasetDefinition) -> CacheEntry:
        if not isinstance(entry, CacheEntry) or not isinstance(entry.records, tuple):
            raise CacheCorruptionError(f"Unexpected cache entry type {type(entry).__name__}")
        if not entry.records or not all(isinstance(record, dict) for record in entry.records):
            raise CacheCorruptionError("Cached records are empty or not mappings")
        if set(entry.records[0]) != set(definition.field_names):
            raise CacheCorruptionError("Cached records do not match the declared fields")
        return entry

    def _cached_entry(self, definition: DatasetDefinition, key: str) -> CacheEntry | None:
        entry = self.cache.get(key)
        if entry is None:
            return None
        try:
            return self._check_entry(entry, definition)
        except CacheCorruptionError as exc:
            logger.warning("Discarding cached data for %s: %s", key, exc)
            self.cache.discard(key)
            return None

    def _fallback_result(
        self, definition: DatasetDefinition, variant: str, identifier: str, reason: str
    ) -> LoadResult:
        logger.warning("Serving fallback data for %s (%s): %s", definition.name, identifier, reason)
        return LoadResult(
            kind=FALLBACK,
            dataset=definition.name,
            variant=variant,
            source=identifier,
            records=self._fallback.get_fallback(definition.name),
            reason=reason,
        )

    async def _load_source(
        self, definition: DatasetDefinition, identifier: str, key: str
    ) -> LoadResult:
        # Nothing below may raise: every failure becomes a fallback result.
        # The variant is filled in per caller by load().
        variant = definition.default_variant
        try:
            signature = await asyncio.to_thread(self._detector.signature, identifier)
        except Exception as exc:
            return self._fallback_result(definition, variant, identifier, str(exc))

        entry = self._cached_entry(definition, key)
        if entry is not None and DatasetCache.is_fresh(entry, signature, self._clock(), self.ttl_ms):
            logger.debug("Using cached data for %s (%d records)", identifier, len(entry.records))
            return LoadResult(
                kind=LIVE,
                dataset=definition.name,
                variant=variant,
                source=identifier,
                records=list(entry.records),
                cached=True,
            )

        logger.info("Reading dataset %s from %s", definition.name, identifier)
        started = time.perf_counter()
        try:
            records = await asyncio.to_thread(self._read, definition, identifier)
        except Exception as exc:
            logger.debug("Read of %s failed", identifier, exc_info=True)
            return self._fallback_result(definition, variant, identifier, str(exc))

        evicted = self.cache.put(
            key, CacheEntry(records=tuple(records), signature=signature, cached_at=self._clock())
        )
        if evicted:
            logger.debug("Cache full; evicted %s", ", ".join(evicted))
        logger.info(
            "Loaded %d %s records in %.0fms",
            len(records),
            definition.name,
            (time.perf_counter() - started) * 1000,
        )
        return LoadResult(
            kind=LIVE,
            dataset=definition.name,
            variant=variant,
            source=identifier,
            records=records,
        )


def _copy_records(records: Iterable[Record]) -> List[Record]:
    # Records hold flat values only.
    return [dict(record) for record in records]


__all__ = ["FALLBACK", "LIVE", "DatasetLoader", "LoadResult"]
