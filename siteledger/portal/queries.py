"""Site search, filtering and headline stats over loaded records."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

ALL_UTILITY_TYPES = "All Types"
ALL_STATUSES = "All Statuses"
UTILITY_TYPES = ("electricity", "gas", "water")
_SEARCH_FIELDS = ("mpanMprnSpid", "siteName", "siteAddress")


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return str(value).lower() if value is not None else ""


def filter_sites(
    sites: Iterable[Mapping[str, Any]],
    *,
    utility_type: str | None = None,
    status: str | None = None,
    search: str | None = None,
    user_id: str | None = None,
) -> List[Mapping[str, Any]]:
    """Filter *sites* the way the portal's sites tab does, newest first.

    ``"All Types"`` and ``"All Statuses"`` behave like no filter. The search
    term matches MPAN/MPRN/SPID, site name or address, case-insensitively.
    """

    results = list(sites)
    if user_id:
        results = [site for site in results if site.get("userId") == user_id]
    if search:
        term = search.lower()
        results = [
            site for site in results if any(term in _text(site, key) for key in _SEARCH_FIELDS)
        ]
    if utility_type and utility_type != ALL_UTILITY_TYPES:
        wanted = utility_type.lower()
        results = [site for site in results if _text(site, "utilityType") == wanted]
    if status and status != ALL_STATUSES:
        wanted = status.lower()
        results = [site for site in results if _text(site, "status") == wanted]
    results.sort(key=lambda site: str(site.get("createdAt") or ""), reverse=True)
    return results


@dataclass(slots=True)
class SiteStats:
    total_sites: int
    active_mpans: int
    monthly_spend: int
    pending_bills: int
    registered: Dict[str, int] = field(default_factory=dict)
    pending: Dict[str, int] = field(default_factory=dict)
    objected: Dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, int]:
        """Flat camelCase mapping as served to the dashboard."""

        payload = {
            "totalSites": self.total_sites,
            "activeMpans": self.active_mpans,
            "monthlySpend": self.monthly_spend,
            "pendingBills": self.pending_bills,
        }
        for utility in UTILITY_TYPES:
            payload[f"{utility}Sites"] = self.registered.get(utility, 0)
            payload[f"{utility}Pending"] = self.pending.get(utility, 0)
            payload[f"{utility}Objections"] = self.objected.get(utility, 0)
        return payload


def _amount(bill: Mapping[str, Any]) -> float:
    try:
        return float(bill.get("amount") or 0)
    except (TypeError, ValueError):
        return 0.0


def site_stats(
    sites: Sequence[Mapping[str, Any]], bills: Sequence[Mapping[str, Any]] = ()
) -> SiteStats:
    """Headline counts for the analytics tab.

    Monthly spend sums paid, validated bills; pending bills are unpaid ones.
    """

    by_status = Counter((_text(site, "utilityType"), _text(site, "status")) for site in sites)
    spend = sum(
        _amount(bill)
        for bill in bills
        if _text(bill, "status") == "paid" and _text(bill, "validationStatus") == "validated"
    )
    return SiteStats(
        total_sites=len(sites),
        active_mpans=sum(1 for site in sites if _text(site, "status") == "registered"),
        monthly_spend=round(spend),
        pending_bills=sum(1 for bill in bills if _text(bill, "status") == "unpaid"),
        registered={utility: by_status[(utility, "registered")] for utility in UTILITY_TYPES},
        pending={utility: by_status[(utility, "pending")] for utility in UTILITY_TYPES},
        objected={utility: by_status[(utility, "objected")] for utility in UTILITY_TYPES},
    )


__all__ = [
    "ALL_STATUSES",
    "ALL_UTILITY_TYPES",
    "SiteStats",
    "filter_sites",
    "site_stats",
]
