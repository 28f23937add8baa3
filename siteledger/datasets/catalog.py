"""Dataset catalog: built-in definitions plus an optional YAML override."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping

import yaml

from .errors import CatalogError
from .fields import DatasetDefinition, FieldSpec
from .fixtures import FALLBACK_RECORDS

logger = logging.getLogger(__name__)


def _text_fields(*names: str) -> List[FieldSpec]:
    return [FieldSpec(name) for name in names]


def _sites() -> DatasetDefinition:
    fields = [
        FieldSpec("id", default_template="site-{row}"),
        FieldSpec("userId", default="user-1"),
        FieldSpec("siteName", default=""),
        FieldSpec("siteAddress", default=""),
        FieldSpec("utilityType", default="electricity"),
        FieldSpec("mpanMprnSpid", default=""),
        *_text_fields(
            "accountId",
            "contractStartDate",
            "contractEndDate",
            "dayUnitRate",
            "nightUnitRate",
            "eveningUnitRate",
            "standingCharges",
            "mopCharges",
            "dcDaCharges",
            "kvaCharges",
        ),
        FieldSpec("eac", kind="int"),
        FieldSpec("status", default="registered"),
        FieldSpec("supplier"),
        FieldSpec("createdAt", default_template="{now}"),
        FieldSpec("updatedAt", default_template="{now}"),
    ]
    return DatasetDefinition(
        name="sites",
        fields=tuple(fields),
        variants={"default": "sites.xlsx", "large": "sites-large.xlsx"},
    )


def _bills() -> DatasetDefinition:
    fields = [
        FieldSpec("id", default_template="bill-{row}"),
        FieldSpec("siteId", required=True),
        *_text_fields("mpanMprnSpid", "generationDate", "billRefNo"),
        FieldSpec("type", default="bill"),
        *_text_fields("fromDate", "toDate", "dueDate"),
        FieldSpec("amount", kind="float", default=0.0),
        FieldSpec("vatPercentage", kind="float"),
        FieldSpec("status", default="pending"),
        FieldSpec("validationStatus", default="pending"),
        FieldSpec("billFilePath"),
    ]
    return DatasetDefinition(name="bills", fields=tuple(fields), variants={"default": "bills.xlsx"})


def _meter_readings() -> DatasetDefinition:
    fields = [
        FieldSpec("id", default_template="reading-{row}"),
        FieldSpec("siteId", required=True),
        *_text_fields("mpanMprnSpid", "utilityType", "readingDate"),
        FieldSpec("readingType", default="actual"),
        FieldSpec("previousReading", kind="int"),
        FieldSpec("currentReading", kind="int"),
        FieldSpec("consumption", kind="int"),
        *_text_fields("readingSource", "meterSerial", "filePath"),
    ]
    return DatasetDefinition(
        name="meter_readings",
        fields=tuple(fields),
        variants={"default": "meter-readings.xlsx"},
    )


def _carbon_reports() -> DatasetDefinition:
    fields = [
        FieldSpec("id", default_template="carbon-{row}"),
        FieldSpec("userId", default="user-1"),
        FieldSpec("reportingPeriod", required=True),
        *[
            FieldSpec(name, kind="float")
            for name in (
                "scope1Emissions",
                "scope2Emissions",
                "scope3Emissions",
                "totalEmissions",
                "emissionReduction",
                "renewablePercentage",
                "carbonOffset",
            )
        ],
        FieldSpec("reportFilePath"),
        FieldSpec("verificationStatus", default="pending"),
    ]
    return DatasetDefinition(
        name="carbon_reports",
        fields=tuple(fields),
        variants={"default": "carbon-reports.xlsx"},
    )


def builtin_definitions() -> List[DatasetDefinition]:
    definitions = [_sites(), _bills(), _meter_readings(), _carbon_reports()]
    for definition in definitions:
        definition.fallback = tuple(FALLBACK_RECORDS[definition.name])
    return definitions


class DatasetCatalog:
    """Lookup of dataset definitions by name."""

    def __init__(self, definitions: Iterable[DatasetDefinition]) -> None:
        self._definitions: Dict[str, DatasetDefinition] = {}
        for definition in definitions:
            if definition.default_variant not in definition.variants:
                raise CatalogError(
                    f"Dataset '{definition.name}' has no '{definition.default_variant}' variant"
                )
            self._definitions[definition.name] = definition

    def get(self, name: str) -> DatasetDefinition:
        try:
            return self._definitions[name]
        except KeyError as exc:
            raise KeyError(f"Dataset '{name}' is not defined") from exc

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[DatasetDefinition]:
        return iter(self._definitions.values())

    def names(self) -> List[str]:
        return list(self._definitions)


def _load_field(payload: Any) -> FieldSpec:
    if isinstance(payload, str):
        return FieldSpec(payload)
    if not isinstance(payload, Mapping) or "name" not in payload:
        raise CatalogError(f"Field definitions need a 'name': {payload!r}")
    try:
        return FieldSpec(
            name=str(payload["name"]),
            kind=str(payload.get("kind", "str")),
            default=payload.get("default"),
            default_template=payload.get("default_template"),
            required=bool(payload.get("required", False)),
        )
    except ValueError as exc:
        raise CatalogError(str(exc)) from exc


def _load_definition(
    name: str, payload: Mapping[str, Any], builtin: DatasetDefinition | None
) -> DatasetDefinition:
    raw_fields = payload.get("fields")
    if raw_fields:
        fields = tuple(_load_field(item) for item in raw_fields)
    elif builtin is not None:
        fields = builtin.fields
    else:
        raise CatalogError(f"Dataset '{name}' does not declare any fields")

    variants = payload.get("variants")
    if isinstance(variants, str):
        variants = {"default": variants}
    if not variants and builtin is not None:
        variants = builtin.variants
    if not isinstance(variants, Mapping) or not variants:
        raise CatalogError(f"Dataset '{name}' does not declare any source files")

    fallback = payload.get("fallback")
    if fallback is None and builtin is not None:
        fallback = builtin.fallback
    if not fallback:
        raise CatalogError(f"Dataset '{name}' needs at least one fallback record")

    return DatasetDefinition(
        name=name,
        fields=fields,
        variants={str(key): str(value) for key, value in variants.items()},
        worksheet=str(payload["worksheet"]) if payload.get("worksheet") else None,
        default_variant=str(payload.get("default_variant", "default")),
        fallback=tuple(dict(record) for record in fallback),
    )


def load_catalog(path: Path | None = None) -> DatasetCatalog:
    """Return the built-in catalog, overridden by the YAML file at *path* if present."""

    builtins = {definition.name: definition for definition in builtin_definitions()}
    if path is None or not path.exists():
        return DatasetCatalog(builtins.values())
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse dataset catalog {path}: {exc}") from exc
    entries = payload.get("datasets") if isinstance(payload, Mapping) else None
    if not isinstance(entries, Mapping):
        raise CatalogError(f"Catalog {path} does not define a 'datasets' mapping")

    definitions = dict(builtins)
    for name, entry in entries.items():
        if entry is not None and not isinstance(entry, Mapping):
            raise CatalogError(f"Dataset '{name}' must be a mapping")
        definitions[str(name)] = _load_definition(str(name), entry or {}, builtins.get(str(name)))
    logger.info("Loaded %d dataset definition(s) from %s", len(entries), path)
    return DatasetCatalog(definitions.values())


__all__ = ["DatasetCatalog", "builtin_definitions", "load_catalog"]
