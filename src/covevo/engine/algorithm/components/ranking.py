"""
Ranking functions: decompose a set of candidates into ordered fronts
with respect to an explicit goal set.

The goal set is always passed in as a snapshot, so a generation is ranked
against a fixed objective set even though the goal manager keeps moving.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from covevo.foundation.candidate import Candidate, fitness_matrix
from covevo.foundation.exceptions import InvalidComponentError
from covevo.foundation.goals import Goal
from covevo.foundation.kernel import KernelBackend, NumPyKernel


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def sorted_goal_ids(goals: Iterable[Goal]) -> list[str]:
    """Column order for fitness matrices."""
    return sorted(goal.goal_id for goal in goals)


def dominates(a: Candidate, b: Candidate, goals: Iterable[Goal]) -> bool:
    """True when ``a`` is <= ``b`` on every goal and < on at least one."""
    strictly = False
    for goal in goals:
        fa = a.get_fitness(goal.goal_id)
        fb = b.get_fitness(goal.goal_id)
        if fa > fb:
            return False
        if fa < fb:
            strictly = True
    return strictly


@dataclass(frozen=True)
class Fronts:
    """Immutable front decomposition. Front 0 is the best."""

    fronts: tuple[tuple[Candidate, ...], ...]
    _ranks: dict[int, int] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        for rank, front in enumerate(self.fronts):
            for cand in front:
                self._ranks[cand.candidate_id] = rank

    def subfront(self, index: int) -> list[Candidate]:
        """Members of front ``index``; empty past the last front."""
        if 0 <= index < len(self.fronts):
            return list(self.fronts[index])
        return []

    @property
    def number_of_subfronts(self) -> int:
        return len(self.fronts)

    def rank_of(self, candidate: Candidate) -> int:
        return self._ranks[candidate.candidate_id]

    def sizes(self) -> tuple[int, ...]:
        return tuple(len(front) for front in self.fronts)

    def __iter__(self) -> Iterator[tuple[Candidate, ...]]:
        return iter(self.fronts)

    def __len__(self) -> int:
        return len(self.fronts)


def _check_unique(candidates: Sequence[Candidate]) -> None:
    ids = [cand.candidate_id for cand in candidates]
    if len(set(ids)) != len(ids):
        raise ValueError("ranking input contains the same candidate more than once.")


class RankingFunction(ABC):
    """Partitions candidates into ordered fronts over a goal set."""

    def __init__(self, kernel: KernelBackend | None = None) -> None:
        self.kernel = kernel or NumPyKernel()

    @abstractmethod
    def compute_ranking(self, candidates: Sequence[Candidate], goals: Iterable[Goal]) -> Fronts:
        """Rank ``candidates``; members of every front keep input order."""

    def _sort(self, candidates: Sequence[Candidate], goal_ids: list[str]) -> list[tuple[Candidate, ...]]:
        if not candidates:
            return []
        F = fitness_matrix(candidates, goal_ids)
        return [tuple(candidates[i] for i in front) for front in self.kernel.non_dominated_sort(F)]


class NonDominatedSorting(RankingFunction):
    """Classical fast non-dominated sorting restricted to the given goals."""

    def compute_ranking(self, candidates: Sequence[Candidate], goals: Iterable[Goal]) -> Fronts:
        candidates = list(candidates)
        _check_unique(candidates)
        fronts = Fronts(tuple(self._sort(candidates, sorted_goal_ids(goals))))
        _logger().debug("Ranked %d candidates into fronts %s", len(candidates), fronts.sizes())
        return fronts


class PreferenceSorting(RankingFunction):
    """
    Many-objective preference sorting.

    Front 0 holds, for every goal, the candidate closest to covering it. Ties
    on the goal are restricted to the tied candidates no other tied one
    dominates, then broken by the smallest size, then by input order, which
    keeps front 0 free of dominated members. The remaining candidates are
    ranked by non-dominated sorting into fronts 1..k.

    Front 0 is picked per goal rather than by dominance, so a member of
    front 1 need not be dominated by any member of front 0: with distances
    a=(0, 9), b=(9, 0) and c=(4, 4) the fronts are {a, b} and {c}.
    """

    def compute_ranking(self, candidates: Sequence[Candidate], goals: Iterable[Goal]) -> Fronts:
        candidates = list(candidates)
        _check_unique(candidates)
        goal_ids = sorted_goal_ids(goals)
        if not candidates or not goal_ids:
            return Fronts(tuple(self._sort(candidates, goal_ids)))

        F = fitness_matrix(candidates, goal_ids)
        sizes = [cand.size if cand.size is not None else np.iinfo(np.int64).max for cand in candidates]

        preferred: set[int] = set()
        for m in range(F.shape[1]):
            ties = np.flatnonzero(F[:, m] == F[:, m].min())
            # only non-dominated ties qualify, so nothing outside front 0 dominates it
            best_ties = ties[self.kernel.non_dominated_sort(F[ties])[0]]
            preferred.add(int(min(best_ties, key=lambda i: (sizes[i], i))))

        front0 = tuple(candidates[i] for i in sorted(preferred))
        rest = [cand for i, cand in enumerate(candidates) if i not in preferred]
        fronts = Fronts((front0, *self._sort(rest, goal_ids)))
        _logger().debug("Preference-ranked %d candidates into fronts %s", len(candidates), fronts.sizes())
        return fronts


RANKINGS: dict[str, type[RankingFunction]] = {
    "non_dominated": NonDominatedSorting,
    "preference": PreferenceSorting,
}


def resolve_ranking(name: str, kernel: KernelBackend | None = None) -> RankingFunction:
    try:
        cls = RANKINGS[name.lower()]
    except KeyError as exc:
        raise InvalidComponentError("ranking", name, sorted(RANKINGS)) from exc
    return cls(kernel)


__all__ = [
    "Fronts",
    "RankingFunction",
    "NonDominatedSorting",
    "PreferenceSorting",
    "RANKINGS",
    "resolve_ranking",
    "dominates",
    "sorted_goal_ids",
]
