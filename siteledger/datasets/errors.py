"""Error taxonomy for dataset loading.

Every read or parse failure raised below is absorbed by
:class:`~siteledger.datasets.loader.DatasetLoader` and turned into a fallback
result. Only configuration problems (unknown dataset names, a broken catalog)
reach callers.
"""
from __future__ import annotations


class DatasetError(RuntimeError):
    """Base class for failures on the read/parse path."""


class SourceNotFoundError(DatasetError):
    """Raised when a dataset source does not exist at load time."""


class EmptySourceError(DatasetError):
    """Raised when a source has no data row beneath its header."""


class MalformedSourceError(DatasetError):
    """Raised when a data row cannot be mapped onto the declared fields."""


class CacheCorruptionError(DatasetError):
    """Raised when a cached entry fails its shape check."""


class CatalogError(RuntimeError):
    """Raised when the dataset catalog cannot be loaded."""


__all__ = [
    "CacheCorruptionError",
    "CatalogError",
    "DatasetError",
    "EmptySourceError",
    "MalformedSourceError",
    "SourceNotFoundError",
]
