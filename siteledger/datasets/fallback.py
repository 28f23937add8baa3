"""Static record sets served when a live source is unavailable."""
from __future__ import annotations

import copy
from typing import Dict, Iterable, List

from .fields import DatasetDefinition, Record, RecordMapper


class FallbackRegistry:
    """Per-dataset fallback records, validated once at construction.

    Records are run through the dataset's field list so they expose the same
    keys as live data. ``get_fallback`` hands out copies; the registry is never
    mutated after construction.
    """

    def __init__(self, definitions: Iterable[DatasetDefinition]) -> None:
        self._records: Dict[str, List[Record]] = {}
        for definition in definitions:
            if not definition.fallback:
                raise ValueError(f"Dataset '{definition.name}' has no fallback records")
            mapper = RecordMapper(definition.fields)
            self._records[definition.name] = mapper.conform(definition.fallback)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def get_fallback(self, name: str) -> List[Record]:
        try:
            records = self._records[name]
        except KeyError as exc:
            raise KeyError(f"No fallback records registered for dataset '{name}'") from exc
        return copy.deepcopy(records)


__all__ = ["FallbackRegistry"]
