"""
Candidate solutions (test cases) carrying per-goal fitness distances.

The payload is opaque to the search core; only the collaborators that build
and vary candidates know what it holds.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np

_ids = itertools.count()


class Candidate:
    """
    One solution under evaluation.

    Distances are filled lazily per goal as the goal manager evaluates the
    candidate; an unevaluated (candidate, goal) pair reads as ``inf``.
    """

    __slots__ = ("candidate_id", "payload", "size", "evaluated", "_fitness")

    def __init__(self, payload: Any = None, *, size: int | None = None) -> None:
        self.candidate_id: int = next(_ids)
        self.payload = payload
        self.size = size
        self.evaluated = False
        self._fitness: dict[str, float] = {}

    def derive(self, payload: Any, *, size: int | None = None) -> "Candidate":
        """Fresh candidate (new id, no distances) for variation operators."""
        return Candidate(payload, size=size)

    def get_fitness(self, goal_id: str) -> float:
        return self._fitness.get(goal_id, math.inf)

    def has_fitness(self, goal_id: str) -> bool:
        return goal_id in self._fitness

    def set_fitness(self, goal_id: str, distance: float) -> None:
        self._fitness[goal_id] = float(distance)

    def covers(self, goal_id: str) -> bool:
        return self._fitness.get(goal_id) == 0.0

    @property
    def fitness_values(self) -> Mapping[str, float]:
        return dict(self._fitness)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self.candidate_id == other.candidate_id

    def __hash__(self) -> int:
        return hash(self.candidate_id)

    def __repr__(self) -> str:
        return f"Candidate(id={self.candidate_id}, size={self.size}, goals={len(self._fitness)})"


def fitness_matrix(candidates: Sequence[Candidate], goal_ids: Iterable[str]) -> np.ndarray:
    """
    Distance matrix of shape (n_candidates, n_goals).

    Rows follow ``candidates`` order, columns follow ``goal_ids`` order.
    """
    ids = list(goal_ids)
    F = np.empty((len(candidates), len(ids)), dtype=float)
    for i, cand in enumerate(candidates):
        for j, goal_id in enumerate(ids):
            F[i, j] = cand.get_fitness(goal_id)
    return F


__all__ = ["Candidate", "fitness_matrix"]
