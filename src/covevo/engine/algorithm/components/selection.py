from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np

from covevo.foundation.candidate import Candidate
from covevo.foundation.exceptions import InvariantViolationError
from covevo.foundation.goals import Goal
from covevo.foundation.kernel import KernelBackend, NumPyKernel

from .diversity import DiversityEstimator
from .ranking import Fronts

Variation = Callable[[Candidate, Candidate, np.random.Generator], Sequence[Candidate]]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass
class SelectionOutcome:
    """Survivors of environmental selection plus the diversity scores computed on the way."""

    population: list[Candidate]
    diversity: dict[Candidate, float] = field(default_factory=dict)
    admitted_fronts: int = 0
    truncated_front: int | None = None


def environmental_selection(
    fronts: Fronts,
    pop_size: int,
    goals: Iterable[Goal],
    estimator: DiversityEstimator,
) -> SelectionOutcome:
    """
    Fill the next population front by front.

    Front 0 is never split: the target size is ``max(pop_size, |front 0|)``.
    Whole fronts are admitted while they fit; the first front that does not
    fit is sorted by diversity (descending, stable) and only its best members
    fill the remaining slots.
    """
    goals = frozenset(goals)
    remain = max(pop_size, len(fronts.subfront(0)))
    outcome = SelectionOutcome(population=[])

    index = 0
    front = fronts.subfront(index)
    while remain > 0 and front and len(front) <= remain:
        outcome.diversity.update(estimator.assign(front, goals))
        outcome.population.extend(front)
        remain -= len(front)
        index += 1
        front = fronts.subfront(index)
    outcome.admitted_fronts = index

    if remain > 0 and front:
        scores = estimator.assign(front, goals)
        outcome.diversity.update(scores)
        ordered = sorted(front, key=lambda cand: -scores[cand])
        outcome.population.extend(ordered[:remain])
        outcome.truncated_front = index
        _logger().debug("Front %d truncated: %d of %d admitted by diversity", index, remain, len(front))
        remain = 0

    if remain < 0:
        raise InvariantViolationError(
            "environmental selection overshot the target population size",
            {"remain": remain, "pop_size": pop_size, "front_sizes": list(fronts.sizes())},
        )
    return outcome


class TournamentBreeder:
    """
    Reference selection + variation collaborator.

    Parents are drawn by tournament on (rank, diversity): the lowest rank
    wins and ties go to the more diverse candidate. Each pair of parents is
    handed to ``variation``, which returns new (unevaluated) candidates.
    """

    def __init__(
        self,
        variation: Variation,
        offspring_size: int | None = None,
        pressure: int = 2,
        kernel: KernelBackend | None = None,
    ) -> None:
        if offspring_size is not None and offspring_size <= 0:
            raise ValueError("offspring_size must be positive.")
        if pressure <= 0:
            raise ValueError("pressure must be a positive integer")
        self.variation = variation
        self.offspring_size = offspring_size
        self.pressure = int(pressure)
        self.kernel = kernel or NumPyKernel()

    def breed(
        self,
        population: Sequence[Candidate],
        fronts: Fronts,
        diversity: Mapping[Candidate, float],
        rng: np.random.Generator,
    ) -> list[Candidate]:
        if not population:
            raise ValueError("population is empty.")
        n_offspring = self.offspring_size or len(population)
        ranks = np.array([fronts.rank_of(cand) for cand in population], dtype=np.int64)
        scores = np.array([diversity.get(cand, 0.0) for cand in population], dtype=float)

        offspring: list[Candidate] = []
        while len(offspring) < n_offspring:
            p1, p2 = self.kernel.tournament_selection(ranks, scores, self.pressure, rng, 2)
            children = list(self.variation(population[int(p1)], population[int(p2)], rng))
            if not children:
                raise ValueError("variation operator returned no offspring.")
            offspring.extend(children)
        return offspring[:n_offspring]


__all__ = ["SelectionOutcome", "environmental_selection", "TournamentBreeder", "Variation"]
