"""
Dynamic goal management.

The manager owns the partition of all goals into uncovered, current and
covered. Evaluating a candidate scores it against the current goals; every
goal reaching distance 0.0 moves to covered, is recorded in the archive and
may unlock goals that depend on it, which are scored in the same call.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from collections.abc import Iterable
from typing import Any

from covevo.foundation.candidate import Candidate
from covevo.foundation.exceptions import FatalEvaluationError, InvariantViolationError
from covevo.foundation.goals import Goal, dependents_of, index_goals, unreachable_goals
from covevo.foundation.protocols import FitnessEvaluator, StoppingCondition

from .archive import CoverageArchive


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _charge(budget: StoppingCondition | None) -> bool:
    """Charge one evaluation to ``budget``; False when it is already spent."""
    if budget is None:
        return True
    try_charge = getattr(budget, "try_charge", None)
    if callable(try_charge):
        return bool(try_charge())
    if budget.is_finished():
        return False
    notify = getattr(budget, "notify_evaluation", None)
    if callable(notify):
        notify()
    return True


class GoalManager:
    """
    Owns the {uncovered, current, covered} partition and drives the archive.

    Parameters
    ----------
    goals : Iterable[Goal]
        Full goal inventory. Goals without dependencies start in ``current``.
    evaluator : FitnessEvaluator
        Scores a candidate against one goal.
    archive : CoverageArchive | None
        Empty archive to fill; a fresh one is created when omitted.
    refine_covered_goals : bool
        Also score candidates against covered goals so the archive can swap
        in better (e.g. shorter) covering candidates.
    """

    def __init__(
        self,
        goals: Iterable[Goal],
        evaluator: FitnessEvaluator,
        archive: CoverageArchive | None = None,
        *,
        refine_covered_goals: bool = True,
    ) -> None:
        self._index = index_goals(goals)
        self._children = dependents_of(self._index)
        self._evaluator = evaluator
        self.archive = archive if archive is not None else CoverageArchive()
        if len(self.archive) != 0:
            raise ValueError("GoalManager requires an empty archive; call archive.reset() first.")
        self.refine_covered_goals = refine_covered_goals
        self._lock = threading.RLock()

        self._covered: set[str] = set()
        self._uncovered: set[str] = set(self._index)
        self._current: set[str] = {goal_id for goal_id, goal in self._index.items() if not goal.dependencies}

        unreachable = unreachable_goals(self._index)
        if unreachable:
            _logger().warning(
                "%d goals sit on dependency cycles and can never become current: %s",
                len(unreachable),
                ", ".join(sorted(unreachable)),
            )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, candidate: Candidate, budget: StoppingCondition | None = None) -> None:
        """
        Score ``candidate`` and update the partition and the archive.

        A no-op once ``budget`` is finished. The first effective evaluation
        of a candidate is charged to the budget; later calls only fill the
        distances of goals unlocked since and are free.
        """
        if not candidate.evaluated:
            if not _charge(budget):
                return
            candidate.evaluated = True
        elif budget is not None and budget.is_finished():
            return

        with self._lock:
            targets = deque(sorted(self._current))

        visited: set[str] = set()
        while targets:
            goal_id = targets.popleft()
            if goal_id in visited:
                continue
            visited.add(goal_id)
            if self._distance(candidate, goal_id) == 0.0:
                targets.extend(self._cover(goal_id, candidate))

        if self.refine_covered_goals:
            with self._lock:
                covered = sorted(self._covered - visited)
            for goal_id in covered:
                if self._distance(candidate, goal_id) == 0.0:
                    self.archive.record(self._index[goal_id], candidate)

    def _distance(self, candidate: Candidate, goal_id: str) -> float:
        if candidate.has_fitness(goal_id):
            return candidate.get_fitness(goal_id)
        goal = self._index[goal_id]
        try:
            value = float(self._evaluator.evaluate(candidate, goal))
        except FatalEvaluationError:
            raise
        except Exception as exc:
            _logger().warning(
                "Evaluation of candidate %s on goal %s failed, treating as uncovered: %s",
                candidate.candidate_id,
                goal_id,
                exc,
            )
            value = math.inf
        else:
            if math.isnan(value) or value < 0.0:
                _logger().warning(
                    "Evaluator returned invalid distance %r for candidate %s on goal %s",
                    value,
                    candidate.candidate_id,
                    goal_id,
                )
                value = math.inf
        candidate.set_fitness(goal_id, value)
        return value

    def _cover(self, goal_id: str, candidate: Candidate) -> list[str]:
        """Mark ``goal_id`` covered by ``candidate``; return the goals it unlocks."""
        with self._lock:
            self.archive.record(self._index[goal_id], candidate)
            if goal_id in self._covered:
                return []
            self._covered.add(goal_id)
            self._uncovered.discard(goal_id)
            self._current.discard(goal_id)
            unlocked = [
                child
                for child in self._children[goal_id]
                if child in self._uncovered
                and child not in self._current
                and self._index[child].dependencies <= self._covered
            ]
            self._current.update(unlocked)
        _logger().debug(
            "Goal %s covered by candidate %s; unlocked %s",
            goal_id,
            candidate.candidate_id,
            unlocked or "nothing",
        )
        return unlocked

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _goals(self, ids: Iterable[str]) -> frozenset[Goal]:
        return frozenset(self._index[goal_id] for goal_id in ids)

    @property
    def uncovered_goals(self) -> frozenset[Goal]:
        with self._lock:
            return self._goals(self._uncovered)

    @property
    def current_goals(self) -> frozenset[Goal]:
        with self._lock:
            return self._goals(self._current)

    @property
    def covered_goals(self) -> frozenset[Goal]:
        with self._lock:
            return self._goals(self._covered)

    @property
    def all_goals(self) -> tuple[Goal, ...]:
        """Every goal, covered and uncovered, in id order."""
        return tuple(self._index.values())

    @property
    def total_goals(self) -> int:
        return len(self._index)

    def goal(self, goal_id: str) -> Goal:
        return self._index[goal_id]

    def partition(self) -> dict[str, list[str]]:
        """Sorted goal ids per partition cell."""
        with self._lock:
            return {
                "covered": sorted(self._covered),
                "current": sorted(self._current),
                "uncovered": sorted(self._uncovered),
            }

    def check_invariants(self) -> None:
        """
        Raises
        ------
        InvariantViolationError
            If the partition or the archive are inconsistent.
        """
        with self._lock:
            problems: list[str] = []
            if not self._current <= self._uncovered:
                problems.append(f"current goals not uncovered: {sorted(self._current - self._uncovered)}")
            if self._uncovered & self._covered:
                problems.append(f"goals both covered and uncovered: {sorted(self._uncovered & self._covered)}")
            if (self._uncovered | self._covered) != self._index.keys():
                problems.append("partition does not span the goal inventory")
            expected = {gid for gid in self._uncovered if self._index[gid].dependencies <= self._covered}
            if self._current != expected:
                problems.append(f"current goals out of sync: {sorted(self._current ^ expected)}")
            archived = self.archive.covered_goal_ids
            if archived != self._covered:
                problems.append(f"archive and covered goals differ: {sorted(archived ^ self._covered)}")
            if problems:
                state: dict[str, Any] = self.partition()
                state["archive"] = sorted(archived)
                raise InvariantViolationError("; ".join(problems), state)


__all__ = ["GoalManager"]
