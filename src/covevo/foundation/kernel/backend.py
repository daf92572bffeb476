from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

import numpy as np


class KernelBackend(ABC):
    """
    Interface for the numeric kernels used by the search loop.
    Kernels work on dense distance matrices F of shape (n_candidates, n_goals)
    and return plain index structures; they never see Candidate objects.
    """

    def device(self) -> str:
        """
        Return a short label describing the primary execution device.
        """
        return "cpu"

    def capabilities(self) -> Iterable[str]:
        """
        Optional backend capability tags (e.g., {"numba"}).
        """
        return ()

    @abstractmethod
    def non_dominated_sort(self, F: np.ndarray) -> list[list[int]]:
        """
        Decompose the rows of F into non-dominated fronts.
        Each front lists row indices in ascending order; front 0 is the best.
        """

    @abstractmethod
    def crowding_distance(self, F: np.ndarray) -> np.ndarray:
        """
        Crowding distance of each row of F, treated as a single front.
        """

    @abstractmethod
    def subvector_dominance(self, F: np.ndarray) -> np.ndarray:
        """
        Per-row diversity from single-goal minima, treated as a single front.
        """

    @abstractmethod
    def tournament_selection(
        self,
        ranks: np.ndarray,
        diversity: np.ndarray,
        pressure: int,
        rng: np.random.Generator,
        n_parents: int,
    ) -> np.ndarray:
        """
        Select n_parents indices using tournament selection.
        """


__all__ = ["KernelBackend"]
