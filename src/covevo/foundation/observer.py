from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class RunContext:
    """
    Encapsulates the static context of a search run.
    Passed to on_start events.
    """

    algorithm: Any  # Algorithm instance
    config: Any  # DynaMOSAConfigData
    total_goals: int = 0
    initial_goals: int = 0
    algorithm_name: str = "dynamosa"
    engine_name: str = "numpy"


@dataclass(frozen=True)
class GenerationSnapshot:
    """
    Structured view of one generation, for telemetry and reporting.

    ``fitness`` maps candidate id -> goal id -> distance for the population
    members, restricted to the goals that were evaluated for them.
    ``offspring`` lists the ids bred in this generation (empty for the
    initial one).
    """

    generation: int
    population: tuple[int, ...]
    covered: tuple[str, ...]
    current: tuple[str, ...]
    uncovered: tuple[str, ...]
    archive: tuple[int, ...]
    evaluations: int = 0
    front_sizes: tuple[int, ...] = ()
    offspring: tuple[int, ...] = ()
    fitness: dict[int, dict[str, float]] = field(default_factory=dict)

    def counts(self) -> dict[str, int]:
        return {
            "covered": len(self.covered),
            "current": len(self.current),
            "uncovered": len(self.uncovered),
            "population": len(self.population),
            "archive": len(self.archive),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "population": list(self.population),
            "covered": list(self.covered),
            "current": list(self.current),
            "uncovered": list(self.uncovered),
            "archive": list(self.archive),
            "evaluations": self.evaluations,
            "front_sizes": list(self.front_sizes),
            "offspring": list(self.offspring),
            "fitness": {str(cid): dict(values) for cid, values in self.fitness.items()},
        }


@runtime_checkable
class SearchObserver(Protocol):
    """
    Observer interface for search lifecycle events.
    Purely observational: nothing flows back into the search core.
    """

    def on_start(self, ctx: RunContext) -> None:
        """Called once after initialization, before the first generation."""
        ...

    def on_generation(self, snapshot: GenerationSnapshot) -> None:
        """Called for the initial population and after every generation."""
        ...

    def on_end(self, result: Any) -> None:
        """Called once with the SearchResult when the search terminates."""
        ...


__all__ = ["RunContext", "GenerationSnapshot", "SearchObserver"]
