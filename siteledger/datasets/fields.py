"""Declared dataset fields and the row-to-record mapper."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .base import TabularContent
from .errors import EmptySourceError, MalformedSourceError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

FIELD_KINDS = ("str", "int", "float")


@dataclass(slots=True, frozen=True)
class FieldSpec:
    """One declared column of a dataset.

    ``default_template`` is rendered with ``str.format`` using ``row`` (the
    1-based data row number) and ``now`` (an ISO-8601 UTC timestamp); it wins
    over ``default`` when both are set.
    """

    name: str
    kind: str = "str"
    default: Any = None
    default_template: str | None = None
    required: bool = False

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unsupported field kind '{self.kind}' for field {self.name}")

    @property
    def has_default(self) -> bool:
        return self.default is not None or self.default_template is not None


@dataclass(slots=True)
class DatasetDefinition:
    """A named dataset: its declared fields and the files backing each variant."""

    name: str
    fields: Tuple[FieldSpec, ...]
    variants: Dict[str, str] = field(default_factory=dict)
    worksheet: str | None = None
    default_variant: str = "default"
    fallback: Tuple[Dict[str, Any], ...] = ()

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    def resolve_variant(self, variant: str | None) -> Tuple[str, str]:
        """Return ``(variant, filename)``, falling back to the default variant."""

        if variant and variant in self.variants:
            return variant, self.variants[variant]
        if variant:
            logger.warning(
                "Dataset %s has no variant '%s'; using '%s'",
                self.name,
                variant,
                self.default_variant,
            )
        return self.default_variant, self.variants[self.default_variant]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _as_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _as_number(value: Any, kind: str) -> int | float:
    if isinstance(value, bool):
        return int(value) if kind == "int" else float(value)
    if isinstance(value, (int, float)):
        return int(value) if kind == "int" else float(value)
    cleaned = str(value).replace(",", "").strip()
    if kind == "int":
        try:
            return int(cleaned)
        except ValueError:
            return int(float(cleaned))
    return float(cleaned)


class RecordMapper:
    """Map header-indexed rows onto a fixed field list."""

    def __init__(self, fields: Sequence[FieldSpec]) -> None:
        self._fields = tuple(fields)

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        return self._fields

    def _default(self, spec: FieldSpec, row_number: int, now: str) -> Any:
        if spec.default_template is not None:
            return spec.default_template.format(row=row_number, now=now)
        return spec.default

    def _resolve(self, spec: FieldSpec, value: Any, row_number: int, now: str) -> Any:
        if _is_blank(value):
            if spec.required and not spec.has_default:
                raise MalformedSourceError(
                    f"Row {row_number}: required field '{spec.name}' is empty"
                )
            return self._default(spec, row_number, now)
        if spec.kind == "str":
            return _as_text(value)
        try:
            return _as_number(value, spec.kind)
        except (TypeError, ValueError, OverflowError) as exc:
            raise MalformedSourceError(
                f"Row {row_number}: field '{spec.name}' expects {spec.kind}, got {value!r}"
            ) from exc

    def map_rows(self, content: TabularContent) -> List[Record]:
        """Map every non-blank data row of *content* onto the declared fields."""

        if not content.headers or not content.rows:
            raise EmptySourceError("Source must have a header row and at least one data row")
        index: Dict[str, int] = {}
        for position, header in enumerate(content.headers):
            key = str(header).strip().lower() if header is not None else ""
            if key and key not in index:
                index[key] = position
        columns = [index.get(spec.name.lower()) for spec in self._fields]

        now = datetime.now(timezone.utc).isoformat()
        records: List[Record] = []
        for row in content.rows:
            if all(_is_blank(cell) for cell in row):
                continue
            row_number = len(records) + 1
            record: Record = {}
            for spec, column in zip(self._fields, columns):
                value = row[column] if column is not None and column < len(row) else None
                record[spec.name] = self._resolve(spec, value, row_number, now)
            records.append(record)
        if not records:
            raise EmptySourceError("Source contains only blank data rows")
        return records

    def conform(self, records: Sequence[Mapping[str, Any]]) -> List[Record]:
        """Apply the field list to already keyed records (used for fallback data)."""

        now = datetime.now(timezone.utc).isoformat()
        return [
            {
                spec.name: self._resolve(spec, source.get(spec.name), row_number, now)
                for spec in self._fields
            }
            for row_number, source in enumerate(records, start=1)
        ]


__all__ = ["DatasetDefinition", "FieldSpec", "Record", "RecordMapper"]
