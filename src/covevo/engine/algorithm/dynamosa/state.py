# algorithm/dynamosa/state.py
"""
State container and result building for DynaMOSA.

This module provides the DynaMOSAState dataclass and the snapshot/result
builders, keeping the main algorithm file focused on the generational loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from covevo.engine.algorithm.components.ranking import Fronts
from covevo.foundation.candidate import Candidate
from covevo.foundation.observer import GenerationSnapshot

if TYPE_CHECKING:
    from covevo.engine.algorithm.components.goals_manager import GoalManager


class SearchStatus(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class DynaMOSAState:
    """Mutable state container for the DynaMOSA search loop."""

    rng: np.random.Generator
    population: list[Candidate]
    fronts: Fronts
    diversity: dict[Candidate, float] = field(default_factory=dict)

    # Offspring bred in the last generation (empty before the first evolve())
    offspring: list[Candidate] = field(default_factory=list)

    # Generation tracking: number of completed evolve() calls
    generation: int = 0


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a search: the archive contents plus run statistics."""

    solutions: tuple[Candidate, ...]
    covered_goals: tuple[str, ...]
    uncovered_goals: tuple[str, ...]
    total_goals: int
    generations: int
    evaluations: int
    elapsed_s: float
    population: tuple[Candidate, ...] = ()

    @property
    def coverage(self) -> float:
        if self.total_goals == 0:
            return 1.0
        return len(self.covered_goals) / self.total_goals

    def to_dict(self) -> dict[str, Any]:
        return {
            "solutions": [cand.candidate_id for cand in self.solutions],
            "covered_goals": list(self.covered_goals),
            "uncovered_goals": list(self.uncovered_goals),
            "total_goals": self.total_goals,
            "coverage": self.coverage,
            "generations": self.generations,
            "evaluations": self.evaluations,
            "elapsed_s": self.elapsed_s,
        }


def build_snapshot(st: DynaMOSAState, goals_manager: GoalManager, evaluations: int) -> GenerationSnapshot:
    partition = goals_manager.partition()
    return GenerationSnapshot(
        generation=st.generation,
        population=tuple(cand.candidate_id for cand in st.population),
        offspring=tuple(cand.candidate_id for cand in st.offspring),
        covered=tuple(partition["covered"]),
        current=tuple(partition["current"]),
        uncovered=tuple(partition["uncovered"]),
        archive=tuple(cand.candidate_id for cand in goals_manager.archive.get_solutions()),
        evaluations=evaluations,
        front_sizes=st.fronts.sizes(),
        fitness={cand.candidate_id: dict(cand.fitness_values) for cand in st.population},
    )


def build_result(
    st: DynaMOSAState | None,
    goals_manager: GoalManager,
    evaluations: int,
    elapsed_s: float,
) -> SearchResult:
    partition = goals_manager.partition()
    return SearchResult(
        solutions=tuple(goals_manager.archive.get_solutions()),
        covered_goals=tuple(partition["covered"]),
        uncovered_goals=tuple(partition["uncovered"]),
        total_goals=goals_manager.total_goals,
        generations=st.generation if st is not None else 0,
        evaluations=evaluations,
        elapsed_s=elapsed_s,
        population=tuple(st.population) if st is not None else (),
    )


__all__ = ["SearchStatus", "DynaMOSAState", "SearchResult", "build_snapshot", "build_result"]
