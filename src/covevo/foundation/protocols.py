"""
Contracts the search core requires from its external collaborators.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from .candidate import Candidate
from .goals import Goal

if TYPE_CHECKING:
    from covevo.engine.algorithm.components.ranking import Fronts


@runtime_checkable
class CandidateFactory(Protocol):
    """Builds random or seeded candidates for the initial population."""

    def create(self) -> Candidate: ...


@runtime_checkable
class FitnessEvaluator(Protocol):
    """
    Scores a candidate against one goal.

    Returns a distance >= 0, where 0.0 means the goal is satisfied. Raising
    FatalEvaluationError aborts the search; any other exception is contained
    by the goal manager and read as "not satisfied".
    """

    def evaluate(self, candidate: Candidate, goal: Goal) -> float: ...


@runtime_checkable
class Breeder(Protocol):
    """Selection plus variation: produces the offspring of one generation."""

    def breed(
        self,
        population: Sequence[Candidate],
        fronts: "Fronts",
        diversity: Mapping[Candidate, float],
        rng: np.random.Generator,
    ) -> list[Candidate]: ...


@runtime_checkable
class StoppingCondition(Protocol):
    """Budget / termination predicate consulted before evaluations and generations."""

    def is_finished(self) -> bool: ...


__all__ = ["CandidateFactory", "FitnessEvaluator", "Breeder", "StoppingCondition"]
