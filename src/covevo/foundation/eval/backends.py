from __future__ import annotations

import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, Optional

from covevo.foundation.exceptions import InvalidComponentError

if TYPE_CHECKING:
    from covevo.engine.algorithm.components.goals_manager import GoalManager
    from covevo.foundation.candidate import Candidate
    from covevo.foundation.protocols import StoppingCondition


class SerialEvalBackend:
    """Synchronous in-process evaluation (default)."""

    def evaluate(
        self,
        candidates: Sequence[Candidate],
        goals_manager: GoalManager,
        budget: StoppingCondition,
    ) -> None:
        for cand in candidates:
            goals_manager.evaluate(cand, budget)

    def close(self) -> None:
        return None


class ThreadPoolEvalBackend:
    """
    Parallel evaluation across independent candidates using a thread pool.

    Notes:
        - Each worker only writes its own candidate's distances; the goal
          partition and the archive are serialized by the goal manager lock.
        - Best suited for evaluators that release the GIL (subprocesses, I/O).
    """

    def __init__(self, n_workers: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)
        self._executor: ThreadPoolExecutor | None = None

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.n_workers, thread_name_prefix="covevo-eval")
        return self._executor

    def evaluate(
        self,
        candidates: Sequence[Candidate],
        goals_manager: GoalManager,
        budget: StoppingCondition,
    ) -> None:
        if self.n_workers <= 1 or len(candidates) <= 1:
            SerialEvalBackend().evaluate(candidates, goals_manager, budget)
            return

        pool = self._pool()
        futures = [pool.submit(goals_manager.evaluate, cand, budget) for cand in candidates]
        # Wait for the whole batch before ranking; re-raise the first fatal error.
        for fut in as_completed(futures):
            fut.result()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None


_BACKENDS = ("serial", "thread")


def resolve_eval_backend(name: str, *, n_workers: Optional[int] = None) -> SerialEvalBackend | ThreadPoolEvalBackend:
    key = (name or "serial").lower()
    if key == "thread":
        return ThreadPoolEvalBackend(n_workers=n_workers)
    if key == "serial":
        return SerialEvalBackend()
    raise InvalidComponentError("evaluation backend", name, list(_BACKENDS))


__all__ = ["SerialEvalBackend", "ThreadPoolEvalBackend", "resolve_eval_backend"]
