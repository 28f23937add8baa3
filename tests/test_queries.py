from __future__ import annotations

from siteledger.datasets.fixtures import BILLS, SITES
from siteledger.portal.queries import filter_sites, site_stats
from siteledger.seeding.synthetic import generate_sites


def test_filters_by_utility_type_newest_first() -> None:
    results = filter_sites(SITES, utility_type="Gas")

    assert [site["id"] for site in results] == ["site-5", "site-8", "site-4"]


def test_all_types_and_all_statuses_mean_no_filter() -> None:
    results = filter_sites(SITES, utility_type="All Types", status="All Statuses")

    assert len(results) == len(SITES)
    assert results[0]["id"] == "site-10"


def test_search_matches_meter_number_name_and_address() -> None:
    assert [site["id"] for site in filter_sites(SITES, search="london")] == ["site-1"]
    assert [site["id"] for site in filter_sites(SITES, search="3012345678")] == ["site-6"]
    assert [site["id"] for site in filter_sites(SITES, search="DEPOT")] == ["site-10"]


def test_search_combines_with_status() -> None:
    results = filter_sites(SITES, search="office", status="objected")

    assert [site["id"] for site in results] == ["site-5"]


def test_user_filter() -> None:
    assert filter_sites(SITES, user_id="user-2") == []


def test_site_stats_matches_dashboard_counts() -> None:
    stats = site_stats(SITES, BILLS)
    payload = stats.as_dict()

    assert payload["totalSites"] == 10
    assert payload["activeMpans"] == 6
    assert payload["monthlySpend"] == 2943
    assert payload["pendingBills"] == 0
    assert payload["electricitySites"] == 3
    assert payload["electricityPending"] == 1
    assert payload["electricityObjections"] == 1
    assert payload["gasSites"] == 1
    assert payload["gasPending"] == 1
    assert payload["gasObjections"] == 1
    assert payload["waterSites"] == 2


def test_synthetic_sites_respect_utility_specific_charges() -> None:
    sites = list(generate_sites(6, seed=3))

    assert [site["utilityType"] for site in sites] == ["gas", "water", "electricity"] * 2
    water = sites[1]
    assert water["mopCharges"] is None and water["nightUnitRate"] is None
    assert water["mpanMprnSpid"].startswith("30") and len(water["mpanMprnSpid"]) == 16
    electricity = sites[2]
    assert electricity["kvaCharges"] is not None
    assert list(generate_sites(6, seed=3)) == sites
