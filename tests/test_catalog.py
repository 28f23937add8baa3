from __future__ import annotations

import pytest

from siteledger.datasets.catalog import load_catalog
from siteledger.datasets.errors import CatalogError
from siteledger.datasets.fallback import FallbackRegistry


def test_builtin_catalog_covers_portal_datasets(tmp_path) -> None:
    catalog = load_catalog(tmp_path / "absent.yaml")

    assert catalog.names() == ["sites", "bills", "meter_readings", "carbon_reports"]
    sites = catalog.get("sites")
    assert sites.variants == {"default": "sites.xlsx", "large": "sites-large.xlsx"}
    assert "mpanMprnSpid" in sites.field_names


def test_yaml_overrides_variants_and_keeps_builtin_fields(tmp_path) -> None:
    path = tmp_path / "datasets.yaml"
    path.write_text(
        "datasets:\n"
        "  sites:\n"
        "    worksheet: Portfolio\n"
        "    variants:\n"
        "      default: portfolio.xlsx\n",
        encoding="utf-8",
    )

    sites = load_catalog(path).get("sites")

    assert sites.variants == {"default": "portfolio.xlsx"}
    assert sites.worksheet == "Portfolio"
    assert sites.fields == load_catalog().get("sites").fields
    assert sites.fallback


def test_yaml_can_declare_new_datasets_with_inline_fallback(tmp_path) -> None:
    path = tmp_path / "datasets.yaml"
    path.write_text(
        "datasets:\n"
        "  solar_projects:\n"
        "    variants: solar.xlsx\n"
        "    fields:\n"
        "      - name: id\n"
        "        default_template: 'solar-{row}'\n"
        "      - name: systemSize\n"
        "        kind: float\n"
        "      - projectName\n"
        "    fallback:\n"
        "      - projectName: Rooftop Array\n"
        "        systemSize: 50\n",
        encoding="utf-8",
    )

    catalog = load_catalog(path)
    registry = FallbackRegistry(catalog)

    assert "sites" in catalog
    assert catalog.get("solar_projects").variants == {"default": "solar.xlsx"}
    assert registry.get_fallback("solar_projects") == [
        {"id": "solar-1", "systemSize": 50.0, "projectName": "Rooftop Array"}
    ]


@pytest.mark.parametrize(
    "body, message",
    [
        ("sources: []\n", "datasets"),
        ("datasets:\n  solar:\n    variants: solar.xlsx\n", "fields"),
        ("datasets:\n  solar:\n    fields: [id]\n", "source files"),
        ("datasets:\n  solar:\n    fields: [id]\n    variants: solar.xlsx\n", "fallback"),
        ("datasets:\n  sites:\n    fields:\n      - kind: int\n", "name"),
        ("datasets:\n  sites:\n    fields:\n      - name: eac\n        kind: money\n", "kind"),
        ("datasets:\n  sites: [1, 2]\n", "mapping"),
        ("datasets: [unclosed\n", "parse"),
    ],
)
def test_invalid_catalogs_raise_catalog_error(tmp_path, body, message) -> None:
    path = tmp_path / "datasets.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(CatalogError, match=message):
        load_catalog(path)


def test_default_variant_must_exist(tmp_path) -> None:
    path = tmp_path / "datasets.yaml"
    path.write_text(
        "datasets:\n  sites:\n    variants:\n      large: sites-large.xlsx\n",
        encoding="utf-8",
    )

    with pytest.raises(CatalogError, match="default"):
        load_catalog(path)
