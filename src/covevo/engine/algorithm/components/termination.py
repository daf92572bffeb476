from __future__ import annotations

import threading
import time
from typing import Any


class SearchBudget:
    """
    Cooperative search budget: candidate evaluations, generations and wall time.

    ``is_finished`` is consulted before each evaluation and each generation.
    Limits left as None are not enforced. The clock starts on ``start()``.
    """

    def __init__(
        self,
        max_evaluations: int | None = None,
        max_generations: int | None = None,
        max_time: float | None = None,
    ) -> None:
        for name, value in (
            ("max_evaluations", max_evaluations),
            ("max_generations", max_generations),
            ("max_time", max_time),
        ):
            if value is not None and value < 0:
                raise ValueError(f"{name} must be >= 0.")
        self.max_evaluations = max_evaluations
        self.max_generations = max_generations
        self.max_time = max_time
        self.evaluations = 0
        self.generations = 0
        self._started_at: float | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """Reset the counters and start the clock."""
        with self._lock:
            self.evaluations = 0
            self.generations = 0
        self._started_at = time.monotonic()

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at

    def notify_evaluation(self) -> None:
        with self._lock:
            self.evaluations += 1

    def try_charge(self) -> bool:
        """Charge one evaluation unless the budget is spent; check and charge are atomic."""
        with self._lock:
            if self.is_finished():
                return False
            self.evaluations += 1
            return True

    def notify_generation(self) -> None:
        self.generations += 1

    def is_finished(self) -> bool:
        if self.max_evaluations is not None and self.evaluations >= self.max_evaluations:
            return True
        if self.max_generations is not None and self.generations >= self.max_generations:
            return True
        if self.max_time is not None and self.elapsed >= self.max_time:
            return True
        return False

    def summary(self) -> dict[str, Any]:
        return {
            "evaluations": self.evaluations,
            "generations": self.generations,
            "elapsed_s": self.elapsed,
        }


def parse_termination(termination: tuple[str, Any]) -> SearchBudget:
    """Build a budget from a ``(type, value)`` criterion.

    Parameters
    ----------
    termination : tuple[str, Any]
        Supported types:
        - "max_evaluations": value is the max number of candidate evaluations
        - "max_generations": value is the max number of generations
        - "max_time": value is the wall-clock limit in seconds
        - "budget": value is a dict with any of the keys above

    Raises
    ------
    ValueError
        If the termination type is unsupported.
    """
    term_type, term_val = termination
    if term_type == "max_evaluations":
        return SearchBudget(max_evaluations=int(term_val))
    if term_type == "max_generations":
        return SearchBudget(max_generations=int(term_val))
    if term_type == "max_time":
        return SearchBudget(max_time=float(term_val))
    if term_type == "budget":
        cfg = dict(term_val)
        unknown = set(cfg) - {"max_evaluations", "max_generations", "max_time"}
        if unknown:
            raise ValueError(f"Unsupported budget keys: {', '.join(sorted(unknown))}")
        return SearchBudget(**cfg)
    raise ValueError(f"Unsupported termination criterion '{term_type}'.")


__all__ = ["SearchBudget", "parse_termination"]
