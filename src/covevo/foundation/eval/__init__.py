from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from covevo.engine.algorithm.components.goals_manager import GoalManager
    from covevo.foundation.candidate import Candidate
    from covevo.foundation.protocols import StoppingCondition


class EvaluationBackend(Protocol):
    """Protocol for evaluation backends: push a batch of candidates through the goal manager."""

    def evaluate(
        self,
        candidates: Sequence[Candidate],
        goals_manager: GoalManager,
        budget: StoppingCondition,
    ) -> None: ...

    def close(self) -> None:  # pragma: no cover - optional for pooled backends
        """Clean up any resources (executors, pools)."""
        return None


__all__ = ["EvaluationBackend"]
