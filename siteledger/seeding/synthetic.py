"""Synthetic site generator for the large performance workbook."""
from __future__ import annotations

import random
from typing import Dict, Iterator

UTILITY_TYPES = ("electricity", "gas", "water")
STATUSES = ("registered", "pending", "objected")
SUPPLIERS = (
    "British Gas",
    "EON Energy",
    "SSE Energy",
    "Centrica",
    "Shell Energy",
    "Thames Water",
    "Octopus Energy",
    "E.ON Next",
    "Severn Trent",
    "EDF Energy",
)
CITY_POSTCODES = {
    "London": "SW1A 1AA",
    "Manchester": "M1 2AB",
    "Birmingham": "B1 3CD",
    "Leeds": "LS1 4EF",
    "Newcastle": "NE1 5GH",
    "Glasgow": "G1 6IJ",
    "Cardiff": "CF1 7KL",
    "Edinburgh": "EH1 8MN",
    "Bristol": "BS1 9OP",
    "Liverpool": "L1 0QR",
}
_CITIES = tuple(CITY_POSTCODES)
_MPAN_PREFIX = {"electricity": "2000", "gas": "10", "water": "30"}


def _meter_number(rng: random.Random, utility: str) -> str:
    prefix = _MPAN_PREFIX[utility]
    digits = 16 - len(prefix)
    return prefix + str(rng.randrange(10**digits)).zfill(digits)


def _rate(rng: random.Random, low: float, spread: float) -> str:
    return f"{rng.random() * spread + low:.2f}"


def generate_sites(count: int, *, seed: int = 0) -> Iterator[Dict[str, object]]:
    """Yield *count* site records cycling utility type, status, supplier and city.

    Night/evening rates and kVA charges only apply to electricity; MOP and
    DC/DA charges do not apply to water.
    """

    rng = random.Random(seed)
    for number in range(1, count + 1):
        utility = UTILITY_TYPES[number % len(UTILITY_TYPES)]
        city = _CITIES[number % len(_CITIES)]
        electricity = utility == "electricity"
        metered = utility != "water"
        yield {
            "id": f"site-{number}",
            "userId": "user-1",
            "siteName": f"Site {number} - {city} Facility",
            "siteAddress": f"{number * 123} Business Street, {city}, {CITY_POSTCODES[city]}",
            "utilityType": utility,
            "mpanMprnSpid": _meter_number(rng, utility),
            "accountId": f"ACC{number:06d}",
            "contractStartDate": "2024-01-01",
            "contractEndDate": "2025-12-31",
            "dayUnitRate": _rate(rng, 5, 10),
            "nightUnitRate": _rate(rng, 3, 5) if electricity else None,
            "eveningUnitRate": _rate(rng, 6, 8) if electricity else None,
            "standingCharges": _rate(rng, 10, 20),
            "mopCharges": _rate(rng, 20, 30) if metered else None,
            "dcDaCharges": _rate(rng, 10, 15) if metered else None,
            "kvaCharges": _rate(rng, 5, 10) if electricity else None,
            "eac": rng.randrange(10000, 510000),
            "status": STATUSES[number % len(STATUSES)],
            "supplier": SUPPLIERS[number % len(SUPPLIERS)],
            "createdAt": "2024-01-01T00:00:00Z",
            "updatedAt": "2024-01-01T00:00:00Z",
        }


__all__ = ["CITY_POSTCODES", "STATUSES", "SUPPLIERS", "UTILITY_TYPES", "generate_sites"]
