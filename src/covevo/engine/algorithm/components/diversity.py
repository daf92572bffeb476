"""
Diversity estimators: per-front scores used to break ties when a front
only partially fits into the next population. Higher is more preferred;
scores are only ever compared inside one front.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import numpy as np

from covevo.foundation.candidate import Candidate, fitness_matrix
from covevo.foundation.exceptions import InvalidComponentError
from covevo.foundation.goals import Goal
from covevo.foundation.kernel import KernelBackend, NumPyKernel

from .ranking import sorted_goal_ids


class DiversityEstimator(ABC):
    def __init__(self, kernel: KernelBackend | None = None) -> None:
        self.kernel = kernel or NumPyKernel()

    def assign(self, front: Sequence[Candidate], goals: Iterable[Goal]) -> dict[Candidate, float]:
        """Score every member of ``front`` within the objective space of ``goals``."""
        front = list(front)
        if not front:
            return {}
        scores = self._scores(fitness_matrix(front, sorted_goal_ids(goals)))
        return {cand: float(score) for cand, score in zip(front, scores)}

    @abstractmethod
    def _scores(self, F: np.ndarray) -> np.ndarray: ...


class SubvectorDominanceDiversity(DiversityEstimator):
    """
    Fast epsilon-dominance assignment: a candidate scores
    (|front| - |ties|) / |front| for every goal on which it attains the
    front minimum, keeping the best value over goals.
    """

    def _scores(self, F: np.ndarray) -> np.ndarray:
        return self.kernel.subvector_dominance(F)


class CrowdingDistanceDiversity(DiversityEstimator):
    """Crowding distance; both extremes of each goal get inf."""

    def _scores(self, F: np.ndarray) -> np.ndarray:
        return self.kernel.crowding_distance(F)


DIVERSITY_ESTIMATORS: dict[str, type[DiversityEstimator]] = {
    "subvector_dominance": SubvectorDominanceDiversity,
    "crowding": CrowdingDistanceDiversity,
}


def resolve_diversity(name: str, kernel: KernelBackend | None = None) -> DiversityEstimator:
    try:
        cls = DIVERSITY_ESTIMATORS[name.lower()]
    except KeyError as exc:
        raise InvalidComponentError("diversity estimator", name, sorted(DIVERSITY_ESTIMATORS)) from exc
    return cls(kernel)


__all__ = [
    "DiversityEstimator",
    "SubvectorDominanceDiversity",
    "CrowdingDistanceDiversity",
    "DIVERSITY_ESTIMATORS",
    "resolve_diversity",
]
