"""Stage runtime used by the siteledger command line."""
from __future__ import annotations

from .registry import StageRegistry, register_stage, registry
from .runner import StageOutcome, StageRunner
from .stage import StageContext, StageDefinition

__all__ = [
    "StageRegistry",
    "StageOutcome",
    "StageRunner",
    "StageContext",
    "StageDefinition",
    "register_stage",
    "registry",
]
