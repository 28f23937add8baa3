"""Stage primitives shared by the seed, load and benchmark commands."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from siteledger.settings import Settings

if TYPE_CHECKING:
    from siteledger.datasets.catalog import DatasetCatalog
    from siteledger.datasets.loader import DatasetLoader


class StageCallable(Protocol):
    def __call__(self, context: "StageContext") -> None:
        ...


@dataclass(slots=True)
class StageContext:
    """Run-wide state handed to each stage.

    Stages build their catalog and loader through :meth:`catalog` and
    :meth:`loader` so that every stage honours the same settings.
    """

    settings: Settings
    run_id: str
    timestamp: datetime
    workspace: Path

    def catalog(self) -> "DatasetCatalog":
        from siteledger.datasets.catalog import load_catalog

        self.settings.ensure_directories()
        return load_catalog(self.settings.catalog_path)

    def loader(self, catalog: "DatasetCatalog | None" = None) -> "DatasetLoader":
        from siteledger.datasets.loader import DatasetLoader

        return DatasetLoader.from_settings(self.settings, catalog or self.catalog())

    def output_path(self, prefix: str, suffix: str = ".json") -> Path:
        """``<output_dir>/<prefix>_<run_id><suffix>``"""

        return self.settings.output_dir / f"{prefix}_{self.run_id}{suffix}"


@dataclass(slots=True, frozen=True)
class StageDefinition:
    name: str
    callable: StageCallable
    description: str
    module: str
