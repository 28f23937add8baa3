"""Workbook seeding stages."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from siteledger.core import register_stage
from siteledger.core.stage import StageContext
from siteledger.datasets.catalog import DatasetCatalog
from siteledger.datasets.errors import CatalogError
from siteledger.datasets.fallback import FallbackRegistry

from .synthetic import generate_sites
from .writers import write_workbook

logger = logging.getLogger(__name__)


def seed_workbooks(catalog: DatasetCatalog, data_dir: Path) -> Dict[str, Path]:
    """Write each dataset's fallback records to its default-variant workbook."""

    fallback = FallbackRegistry(catalog)
    written: Dict[str, Path] = {}
    for definition in catalog:
        path = data_dir / definition.variants[definition.default_variant]
        if path.suffix.lower() != ".xlsx":
            logger.warning("Skipping %s: only .xlsx sources can be seeded", path)
            continue
        write_workbook(
            path,
            definition.field_names,
            fallback.get_fallback(definition.name),
            sheet_title=definition.worksheet or definition.name,
        )
        written[definition.name] = path
    return written


def seed_large_sites(catalog: DatasetCatalog, data_dir: Path, count: int) -> Path:
    """Write *count* synthetic sites to the ``large`` variant of ``sites``."""

    definition = catalog.get("sites")
    if "large" not in definition.variants:
        raise CatalogError("Dataset 'sites' does not declare a 'large' variant")
    path = data_dir / definition.variants["large"]
    write_workbook(
        path,
        definition.field_names,
        generate_sites(count),
        sheet_title=definition.worksheet or "sites",
    )
    return path


@register_stage("seed", "Write sample workbooks for every dataset from fallback data.")
def run_seed(context: StageContext) -> None:
    catalog = context.catalog()
    written = seed_workbooks(catalog, context.settings.data_dir)
    logger.info("Seeded %d workbook(s) in %s", len(written), context.settings.data_dir)


@register_stage("seed-large", "Write the large synthetic sites workbook.")
def run_seed_large(context: StageContext) -> None:
    catalog = context.catalog()
    path = seed_large_sites(catalog, context.settings.data_dir, context.settings.large_seed_count)
    logger.info("Seeded %d synthetic sites into %s", context.settings.large_seed_count, path)


__all__ = ["run_seed", "run_seed_large", "seed_large_sites", "seed_workbooks"]
