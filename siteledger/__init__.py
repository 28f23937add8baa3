"""siteledger - spreadsheet-backed dataset cache for the utility client portal."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from siteledger.core import StageContext, StageRunner, registry
from siteledger.core.utils import package_version
from siteledger.settings import Settings

__all__ = [
    "__version__",
    "StageContext",
    "StageRunner",
    "Settings",
    "registry",
    "bootstrap",
    "create_default_context",
]


def __getattr__(name: str):
    if name == "__version__":
        return package_version()
    raise AttributeError(name)


def bootstrap() -> None:
    """Import stage modules so their stages register in run order."""

    from siteledger import seeding  # noqa: F401
    from siteledger.datasets import pipeline  # noqa: F401
    from siteledger import portal  # noqa: F401


def create_default_context(settings: Settings | None = None) -> StageContext:
    """Construct a :class:`StageContext` for command-line runs."""

    settings = settings or Settings.load()
    settings.ensure_directories()
    now = datetime.now(timezone.utc)
    return StageContext(
        settings=settings,
        run_id=now.strftime("%Y%m%d%H%M%S"),
        timestamp=now,
        workspace=Path.cwd(),
    )
