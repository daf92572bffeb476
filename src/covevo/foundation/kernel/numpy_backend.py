from __future__ import annotations

from typing import Iterable

import numpy as np

from .backend import KernelBackend


def _fast_non_dominated_sort(F: np.ndarray) -> list[list[int]]:
    """
    Classic O(M N^2) fast non-dominated sort.
    Returns a list of fronts, each a list of row indices in ascending order.
    """
    N = F.shape[0]
    if N == 0:
        return []

    less_equal = F[:, None, :] <= F[None, :, :]
    strictly_less = F[:, None, :] < F[None, :, :]
    dom_matrix = np.logical_and(
        np.all(less_equal, axis=2),
        np.any(strictly_less, axis=2),
    )

    dominated_count = dom_matrix.sum(axis=0).astype(np.int64)
    fronts = []

    current = np.flatnonzero(dominated_count == 0)
    while current.size > 0:
        fronts.append(current.tolist())
        dom_contrib = dom_matrix[current].sum(axis=0)
        dominated_count -= dom_contrib
        dominated_count[current] = -1
        dom_matrix[current] = False
        current = np.flatnonzero(dominated_count == 0)

    return fronts


def _finite_column(col: np.ndarray) -> np.ndarray | None:
    """Replace infinite distances by a cap just beyond the largest finite one."""
    finite = np.isfinite(col)
    if finite.all():
        return col
    if not finite.any():
        return None
    cap = col[finite].max() + 1.0
    return np.where(finite, col, cap)


def _compute_crowding(F: np.ndarray) -> np.ndarray:
    """
    Crowding distance over distinct values, so equal distances share a contribution.
    Extremes of every goal get inf; a single-member front gets inf.
    """
    N = F.shape[0]
    crowding = np.zeros(N, dtype=float)
    if N == 0:
        return crowding
    if N == 1:
        crowding[0] = np.inf
        return crowding

    for m in range(F.shape[1]):
        col = _finite_column(F[:, m])
        if col is None:
            continue
        values, inverse = np.unique(col, return_inverse=True)
        if values.size == 1:
            continue
        span = values[-1] - values[0]
        contrib = np.zeros(values.size, dtype=float)
        contrib[0] = np.inf
        contrib[-1] = np.inf
        contrib[1:-1] = (values[2:] - values[:-2]) / span
        crowding += contrib[inverse.reshape(-1)]

    return crowding


def _compute_subvector_dominance(F: np.ndarray) -> np.ndarray:
    """
    For every goal whose distances are not all equal, the members attaining the
    minimum get (N - |min set|) / N; scores keep the maximum over goals.
    """
    N = F.shape[0]
    scores = np.zeros(N, dtype=float)
    if N == 0:
        return scores
    for m in range(F.shape[1]):
        col = F[:, m]
        lo = col.min()
        if lo == col.max():
            continue
        min_mask = col == lo
        value = (N - int(min_mask.sum())) / N
        scores[min_mask] = np.maximum(scores[min_mask], value)
    return scores


class NumPyKernel(KernelBackend):
    """
    Backend with pure NumPy implementations of the ranking and diversity kernels.
    """

    def capabilities(self) -> Iterable[str]:
        return ("cpu",)

    def non_dominated_sort(self, F: np.ndarray) -> list[list[int]]:
        return _fast_non_dominated_sort(np.asarray(F, dtype=float))

    def crowding_distance(self, F: np.ndarray) -> np.ndarray:
        return _compute_crowding(np.asarray(F, dtype=float))

    def subvector_dominance(self, F: np.ndarray) -> np.ndarray:
        return _compute_subvector_dominance(np.asarray(F, dtype=float))

    def tournament_selection(
        self,
        ranks: np.ndarray,
        diversity: np.ndarray,
        pressure: int,
        rng: np.random.Generator,
        n_parents: int,
    ) -> np.ndarray:
        """
        Standard binary/m-ary tournament:
        smallest rank wins; ties go to higher diversity, then to the first drawn.
        """
        N = ranks.shape[0]
        if pressure <= 0:
            raise ValueError("pressure must be a positive integer")
        if n_parents <= 0 or N == 0:
            return np.empty(0, dtype=int)

        candidates = rng.integers(0, N, size=(n_parents, pressure))
        candidate_ranks = ranks[candidates]
        best_rank = candidate_ranks.min(axis=1, keepdims=True)
        candidate_div = np.where(candidate_ranks == best_rank, diversity[candidates], -1.0)

        winner_cols = np.argmax(candidate_div, axis=1)
        return candidates[np.arange(n_parents), winner_cols]
