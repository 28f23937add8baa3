"""Cached, fallback-safe loading of tabular datasets."""
from __future__ import annotations

from .cache import CacheEntry, CacheStats, DatasetCache
from .catalog import DatasetCatalog, load_catalog
from .errors import (
    CacheCorruptionError,
    CatalogError,
    DatasetError,
    EmptySourceError,
    MalformedSourceError,
    SourceNotFoundError,
)
from .fallback import FallbackRegistry
from .fields import DatasetDefinition, FieldSpec, RecordMapper
from .loader import FALLBACK, LIVE, DatasetLoader, LoadResult

__all__ = [
    "FALLBACK",
    "LIVE",
    "CacheCorruptionError",
    "CacheEntry",
    "CacheStats",
    "CatalogError",
    "DatasetCache",
    "DatasetCatalog",
    "DatasetDefinition",
    "DatasetError",
    "DatasetLoader",
    "EmptySourceError",
    "FallbackRegistry",
    "FieldSpec",
    "LoadResult",
    "MalformedSourceError",
    "RecordMapper",
    "SourceNotFoundError",
    "load_catalog",
]
