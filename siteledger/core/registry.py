"""Registry of the stages the CLI can run."""
from __future__ import annotations

from typing import Callable, Dict, Iterator, List

from .stage import StageCallable, StageDefinition


def _summary(func: StageCallable) -> str:
    doc = (func.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


class StageRegistry:
    """Stages by name, in the order their modules registered them."""

    def __init__(self) -> None:
        self._stages: Dict[str, StageDefinition] = {}

    def register(self, name: str, func: StageCallable, description: str = "") -> StageCallable:
        if name in self._stages:
            raise ValueError(f"Stage '{name}' is already registered")
        self._stages[name] = StageDefinition(
            name=name,
            callable=func,
            description=description or _summary(func),
            module=func.__module__,
        )
        return func

    def stage(self, name: str, description: str = "") -> Callable[[StageCallable], StageCallable]:
        """Decorator form of :meth:`register`."""

        return lambda func: self.register(name, func, description)

    def get(self, name: str) -> StageDefinition:
        try:
            return self._stages[name]
        except KeyError as exc:
            raise KeyError(f"Stage '{name}' is not registered") from exc

    def __iter__(self) -> Iterator[StageDefinition]:
        return iter(self._stages.values())

    def names(self) -> List[str]:
        return list(self._stages)


registry = StageRegistry()
register_stage = registry.stage
