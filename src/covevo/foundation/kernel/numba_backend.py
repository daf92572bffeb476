# kernel/numba_backend.py
import numpy as np
from typing import Iterable

from numba import njit

from .backend import KernelBackend
from .numpy_backend import NumPyKernel as _NumPyKernel


@njit(cache=True)
def _fast_non_dominated_sort_ranks(F: np.ndarray) -> np.ndarray:
    N = F.shape[0]
    if N == 0:
        return np.empty(0, dtype=np.int64)

    M = F.shape[1]
    dom_matrix = np.zeros((N, N), dtype=np.bool_)
    dominated_count = np.zeros(N, dtype=np.int64)

    for p in range(N):
        for q in range(N):
            if p == q:
                continue
            less_equal = True
            strictly_less = False
            for m in range(M):
                fp = F[p, m]
                fq = F[q, m]
                if fp > fq:
                    less_equal = False
                    break
                elif fp < fq:
                    strictly_less = True
            if less_equal and strictly_less:
                dom_matrix[p, q] = True
                dominated_count[q] += 1

    ranks = np.empty(N, dtype=np.int64)
    current = np.empty(N, dtype=np.int64)
    next_front = np.empty(N, dtype=np.int64)

    current_size = 0
    for i in range(N):
        if dominated_count[i] == 0:
            ranks[i] = 0
            current[current_size] = i
            current_size += 1

    level = 0
    while current_size > 0:
        next_size = 0
        for idx in range(current_size):
            p = current[idx]
            for q in range(N):
                if dom_matrix[p, q]:
                    dominated_count[q] -= 1
                    if dominated_count[q] == 0:
                        ranks[q] = level + 1
                        next_front[next_size] = q
                        next_size += 1

        for i in range(next_size):
            current[i] = next_front[i]
        current_size = next_size
        level += 1

    return ranks


def _ranks_to_fronts(ranks: np.ndarray) -> list[list[int]]:
    if ranks.size == 0:
        return []
    fronts: list[list[int]] = [[] for _ in range(int(ranks.max()) + 1)]
    for idx, rank in enumerate(ranks.tolist()):
        fronts[rank].append(idx)
    return fronts


class NumbaKernel(KernelBackend):
    """
    Alternative backend with the non-dominated sort compiled with Numba.
    Diversity and selection kernels reuse the NumPy implementations.
    """

    def __init__(self):
        self._numpy_ops = _NumPyKernel()

    def capabilities(self) -> Iterable[str]:
        return ("numba",)

    def non_dominated_sort(self, F: np.ndarray) -> list[list[int]]:
        ranks = _fast_non_dominated_sort_ranks(np.ascontiguousarray(F, dtype=np.float64))
        return _ranks_to_fronts(ranks)

    def crowding_distance(self, F: np.ndarray) -> np.ndarray:
        return self._numpy_ops.crowding_distance(F)

    def subvector_dominance(self, F: np.ndarray) -> np.ndarray:
        return self._numpy_ops.subvector_dominance(F)

    def tournament_selection(
        self,
        ranks: np.ndarray,
        diversity: np.ndarray,
        pressure: int,
        rng: np.random.Generator,
        n_parents: int,
    ) -> np.ndarray:
        return self._numpy_ops.tournament_selection(ranks, diversity, pressure, rng, n_parents)
