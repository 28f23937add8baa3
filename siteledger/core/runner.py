"""Sequential stage runner for the siteledger CLI."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .registry import StageRegistry
from .stage import StageContext

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StageOutcome:
    """Name and wall-clock duration of a completed stage."""

    name: str
    seconds: float


class StageRunner:
    """Execute registered stages one after the other."""

    def __init__(self, registry: StageRegistry) -> None:
        self._registry = registry

    def available(self) -> List[str]:
        return self._registry.names()

    def run(self, stages: Sequence[str], context: StageContext) -> List[StageOutcome]:
        """Run each stage in *stages* with *context* and report durations."""

        outcomes: List[StageOutcome] = []
        for name in stages:
            definition = self._registry.get(name)
            stage_logger = logging.getLogger(definition.module)
            stage_logger.info(
                "Starting stage '%s' (run_id=%s)", definition.name, context.run_id
            )
            started = time.perf_counter()
            try:
                definition.callable(context)
            except Exception:
                stage_logger.exception("Stage '%s' failed", definition.name)
                raise
            elapsed = time.perf_counter() - started
            stage_logger.info("Completed stage '%s' in %.2fs", definition.name, elapsed)
            outcomes.append(StageOutcome(name=definition.name, seconds=elapsed))
        return outcomes

    def resolve(self, requested: Iterable[str] | None) -> List[str]:
        """Validate *requested* stage names, defaulting to every stage."""

        if not requested:
            return self.available()
        requested = list(requested)
        missing = [name for name in requested if name not in self._registry]
        if missing:
            raise ValueError(f"Unknown stages requested: {', '.join(missing)}")
        # Keep first occurrence order
        return list(dict.fromkeys(requested))
