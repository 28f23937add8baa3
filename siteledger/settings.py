"""Environment-driven configuration for siteledger."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    data_dir: Path
    output_dir: Path
    sqlite_path: Path
    catalog_path: Path
    cache_ttl_ms: int
    max_cache_entries: int
    load_timeout_s: float | None
    large_seed_count: int
    log_level: str

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment variables with sensible defaults."""

        return cls(
            data_dir=Path(os.getenv("SITELEDGER_DATA_DIR", "data")),
            output_dir=Path(os.getenv("SITELEDGER_OUTPUT_DIR", "artifacts")),
            sqlite_path=Path(os.getenv("SITELEDGER_DB_PATH", "siteledger.sqlite")),
            catalog_path=Path(os.getenv("SITELEDGER_CATALOG", "config/datasets.yaml")),
            cache_ttl_ms=int(os.getenv("SITELEDGER_CACHE_TTL_MS", "30000")),
            max_cache_entries=int(os.getenv("SITELEDGER_MAX_CACHE_ENTRIES", "5")),
            load_timeout_s=_optional_float("SITELEDGER_LOAD_TIMEOUT_S"),
            large_seed_count=int(os.getenv("SITELEDGER_LARGE_SEED_COUNT", "20000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def ensure_directories(self) -> None:
        """Create directories required for the runtime to operate."""

        for path in {self.data_dir, self.output_dir, self.sqlite_path.parent}:
            if not path.exists():
                path.mkdir(parents=True, exist_ok=True)
