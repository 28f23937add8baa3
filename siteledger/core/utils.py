"""Miscellaneous helpers for the siteledger runtime."""
from __future__ import annotations

from importlib import metadata

__all__ = ["package_version"]


def package_version() -> str:
    """Return the installed siteledger version, or ``0.0.0`` from a source checkout."""

    try:
        return metadata.version("siteledger")
    except metadata.PackageNotFoundError:
        return "0.0.0"
