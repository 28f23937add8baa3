from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from siteledger.datasets.cache import DatasetCache
from siteledger.datasets.catalog import DatasetCatalog, builtin_definitions, load_catalog
from siteledger.datasets.fields import DatasetDefinition, FieldSpec
from siteledger.datasets.fixtures import SITES
from siteledger.datasets.loader import FALLBACK, LIVE, DatasetLoader

DATA_DIR = Path("/srv/portal/data")
SITES_PATH = str(DATA_DIR / "sites.xlsx")
LARGE_PATH = str(DATA_DIR / "sites-large.xlsx")
BILLS_PATH = str(DATA_DIR / "bills.xlsx")
READINGS_PATH = str(DATA_DIR / "meter-readings.xlsx")
SITES_KEY = f"sites:{SITES_PATH}"

SITE_HEADERS = ["id", "siteName", "utilityType"]
SITE_ROWS = [["site-1", "Main Office", "electricity"]]


def _loader(source, clock, **kwargs) -> DatasetLoader:
    return DatasetLoader(load_catalog(), DATA_DIR, source=source, clock=clock, **kwargs)


def test_loads_live_records_with_declared_defaults(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)

    result = asyncio.run(_loader(stub_source, clock).load("sites"))

    assert result.kind == LIVE
    assert result.is_live
    assert not result.cached
    assert result.source == SITES_PATH
    [record] = result.records
    assert record["id"] == "site-1"
    assert record["siteName"] == "Main Office"
    assert record["utilityType"] == "electricity"
    assert record["status"] == "registered"
    assert record["eac"] is None


def test_second_load_within_ttl_is_served_from_cache(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock)

    async def scenario():
        first = await loader.load("sites")
        clock.advance(29.0)
        second = await loader.load("sites")
        return first, second

    first, second = asyncio.run(scenario())

    assert stub_source.reads == [SITES_PATH]
    assert second.cached
    assert second.records == first.records


def test_signature_change_forces_a_fresh_read(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock)

    asyncio.run(loader.load("sites"))
    stub_source.put(SITES_PATH, SITE_HEADERS, [["site-1", "Renamed Office", "gas"]], mtime=2)
    clock.advance(1.0)
    result = asyncio.run(loader.load("sites"))

    assert len(stub_source.reads) == 2
    assert not result.cached
    assert result.records[0]["siteName"] == "Renamed Office"


def test_ttl_expiry_forces_a_fresh_read_without_file_change(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock, ttl_ms=30000)

    asyncio.run(loader.load("sites"))
    clock.advance(30.0)
    result = asyncio.run(loader.load("sites"))

    assert len(stub_source.reads) == 2
    assert result.kind == LIVE
    assert not result.cached


def test_missing_file_resolves_with_fallback_records(tmp_path) -> None:
    loader = DatasetLoader(load_catalog(), tmp_path / "missing")

    result = asyncio.run(loader.load("sites"))

    assert result.kind == FALLBACK
    assert len(result.records) == len(SITES) >= 1
    assert result.records[0]["id"] == "site-1"
    assert "not found" in result.reason
    assert loader.cache_stats().size == 0


def test_fallback_is_never_cached_so_a_later_read_wins(stub_source, clock) -> None:
    loader = _loader(stub_source, clock)

    first = asyncio.run(loader.load("sites"))
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    second = asyncio.run(loader.load("sites"))

    assert first.kind == FALLBACK
    assert second.kind == LIVE
    assert len(second.records) == 1


@pytest.mark.parametrize(
    "headers, rows",
    [
        (["id", "siteName"], []),
        (["id", "eac"], [["site-1", "not a number"]]),
    ],
    ids=["header-only", "malformed-number"],
)
def test_parse_failures_fall_back(stub_source, clock, headers, rows) -> None:
    stub_source.put(SITES_PATH, headers, rows)
    loader = _loader(stub_source, clock)

    result = asyncio.run(loader.load("sites"))

    assert result.kind == FALLBACK
    assert result.reason
    assert loader.cache_stats().size == 0


def test_unexpected_read_errors_fall_back(stub_source, clock) -> None:
    class BrokenSource(type(stub_source)):
        def read(self, identifier, *, worksheet=None):
            raise OSError("disk went away")

    source = BrokenSource()
    source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)

    result = asyncio.run(_loader(source, clock).load("sites"))

    assert result.kind == FALLBACK
    assert result.reason == "disk went away"


def test_cache_never_exceeds_max_entries_across_datasets(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.put(BILLS_PATH, ["id", "siteId", "amount"], [["bill-1", "site-1", "86.07"]])
    stub_source.put(READINGS_PATH, ["siteId", "consumption"], [["site-1", "2625"]])
    loader = _loader(stub_source, clock, cache=DatasetCache(max_entries=2))

    async def scenario():
        for name in ("sites", "bills", "meter_readings"):
            result = await loader.load(name)
            assert result.kind == LIVE
            assert loader.cache_stats().size <= 2

    asyncio.run(scenario())

    stats = loader.cache_stats()
    assert stats.size == 2
    assert stats.keys == [f"bills:{BILLS_PATH}", f"meter_readings:{READINGS_PATH}"]


def test_variants_are_cached_independently(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.put(LARGE_PATH, SITE_HEADERS, SITE_ROWS * 3)
    loader = _loader(stub_source, clock)

    async def scenario():
        return await loader.load("sites"), await loader.load("sites", "large")

    default, large = asyncio.run(scenario())

    assert default.variant == "default"
    assert large.variant == "large"
    assert large.record_count == 3
    assert loader.cache_stats().keys == [SITES_KEY, f"sites:{LARGE_PATH}"]


def test_unknown_variant_uses_default_source(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)

    result = asyncio.run(_loader(stub_source, clock).load("sites", "enormous"))

    assert result.variant == "default"
    assert result.kind == LIVE


def test_unknown_dataset_is_a_configuration_error(stub_source, clock) -> None:
    with pytest.raises(KeyError):
        asyncio.run(_loader(stub_source, clock).load("invoices"))


def test_concurrent_loads_share_one_read(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.delay = 0.05
    loader = _loader(stub_source, clock)

    async def scenario():
        return await asyncio.gather(*(loader.load("sites") for _ in range(4)))

    results = asyncio.run(scenario())

    assert stub_source.reads == [SITES_PATH]
    assert all(result.kind == LIVE for result in results)
    assert loader._inflight == {}


def test_slow_reads_time_out_into_fallback(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.delay = 0.3
    loader = _loader(stub_source, clock, timeout=0.01)

    result = asyncio.run(loader.load("sites"))

    assert result.kind == FALLBACK
    assert "timed out" in result.reason
    assert loader.cache_stats().size == 0


def test_corrupted_cache_entry_is_treated_as_a_miss(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock)
    loader.cache.put(SITES_KEY, {"records": "garbage"})

    result = asyncio.run(loader.load("sites"))

    assert result.kind == LIVE
    assert stub_source.reads == [SITES_PATH]
    assert loader.cache.get(SITES_KEY).records[0]["id"] == "site-1"


def test_load_records_returns_plain_list(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)

    records = asyncio.run(_loader(stub_source, clock).load_records("sites"))

    assert [record["id"] for record in records] == ["site-1"]


def test_clear_cache_forces_reread(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock)

    loader.load_sync("sites")
    loader.clear_cache()
    loader.load_sync("sites")

    assert len(stub_source.reads) == 2


def test_callers_cannot_alter_cached_records(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    loader = _loader(stub_source, clock)

    async def scenario():
        first = await loader.load("sites")
        first.records[0]["siteName"] = "Edited by caller"
        second = await loader.load("sites")
        second.records[0]["siteName"] = "Edited again"
        third = await loader.load("sites")
        return second, third

    second, third = asyncio.run(scenario())

    assert second.cached and third.cached
    assert third.records[0]["siteName"] == "Main Office"
    assert loader.cache.get(SITES_KEY).records[0]["siteName"] == "Main Office"


def test_concurrent_callers_get_independent_records(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.delay = 0.05
    loader = _loader(stub_source, clock)

    async def scenario():
        return await asyncio.gather(loader.load("sites"), loader.load("sites"))

    first, second = asyncio.run(scenario())

    assert stub_source.reads == [SITES_PATH]
    assert first.records == second.records
    assert first.records[0] is not second.records[0]


def test_datasets_sharing_a_file_keep_their_own_fields(stub_source, clock) -> None:
    site_names = DatasetDefinition(
        name="site_names",
        fields=(FieldSpec("id"), FieldSpec("label")),
        variants={"default": "sites.xlsx"},
        fallback=({"id": "site-1", "label": "Main Office"},),
    )
    catalog = DatasetCatalog([*builtin_definitions(), site_names])
    stub_source.put(SITES_PATH, SITE_HEADERS + ["label"], [SITE_ROWS[0] + ["HQ"]])
    stub_source.delay = 0.05
    loader = DatasetLoader(catalog, DATA_DIR, source=stub_source, clock=clock)

    async def scenario():
        concurrent = await asyncio.gather(loader.load("sites"), loader.load("site_names"))
        sequential = await loader.load("site_names"), await loader.load("sites")
        return concurrent, sequential

    (sites, names), (names_again, sites_again) = asyncio.run(scenario())

    assert names.kind == LIVE
    assert names.dataset == "site_names"
    assert names.records == [{"id": "site-1", "label": "HQ"}]
    assert set(sites.records[0]) == set(catalog.get("sites").field_names)
    assert names_again.cached and sites_again.cached
    assert names_again.records == names.records
    assert len(stub_source.reads) == 2


def test_each_caller_applies_its_own_timeout(stub_source, clock) -> None:
    stub_source.put(SITES_PATH, SITE_HEADERS, SITE_ROWS)
    stub_source.delay = 0.2
    loader = _loader(stub_source, clock)

    async def scenario():
        return await asyncio.gather(
            loader.load("sites"), loader.load("sites", timeout=0.01)
        )

    patient, hasty = asyncio.run(scenario())

    assert patient.kind == LIVE
    assert hasty.kind == FALLBACK
    assert "timed out after 0.01s" in hasty.reason
    assert stub_source.reads == [SITES_PATH]
    assert loader.cache_stats().size == 1
