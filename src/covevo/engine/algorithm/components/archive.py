"""
Coverage archive: the best candidate found so far for every covered goal.

The archive holds candidate handles (ids) per goal plus an arena with the
referenced candidates, so one candidate shared by several goals is stored once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from covevo.foundation.candidate import Candidate
from covevo.foundation.exceptions import InvalidComponentError
from covevo.foundation.goals import Goal

ReplacementPolicy = Callable[[Candidate, Candidate], bool]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def prefer_shorter(challenger: Candidate, incumbent: Candidate) -> bool:
    """Replace only when the challenger is strictly smaller. Unsized candidates never replace."""
    if challenger.size is None:
        return False
    if incumbent.size is None:
        return True
    return challenger.size < incumbent.size


def keep_first(challenger: Candidate, incumbent: Candidate) -> bool:
    """The first covering candidate is kept for good."""
    return False


ARCHIVE_POLICIES: dict[str, ReplacementPolicy] = {
    "shortest": prefer_shorter,
    "first": keep_first,
}


def resolve_policy(policy: str | ReplacementPolicy) -> ReplacementPolicy:
    if callable(policy):
        return policy
    try:
        return ARCHIVE_POLICIES[policy.lower()]
    except KeyError as exc:
        raise InvalidComponentError("archive policy", policy, sorted(ARCHIVE_POLICIES)) from exc


class CoverageArchive:
    """
    Per-goal store of covering candidates.

    ``record`` is monotonic: an entry is created for a goal the first time a
    covering candidate is offered and afterwards replaced only when the
    replacement policy says the challenger is strictly better.
    """

    def __init__(self, policy: str | ReplacementPolicy = "shortest") -> None:
        self._is_better = resolve_policy(policy)
        self._slots: dict[str, int] = {}
        self._arena: dict[int, Candidate] = {}
        self._refs: dict[int, int] = {}
        self._lock = threading.Lock()

    def record(self, goal: Goal, candidate: Candidate) -> bool:
        """
        Offer ``candidate`` for ``goal``. Returns True when the archive changed.

        Raises
        ------
        ValueError
            If the candidate does not cover the goal.
        """
        if not candidate.covers(goal.goal_id):
            raise ValueError(
                f"candidate {candidate.candidate_id} does not cover goal '{goal.goal_id}' "
                f"(distance={candidate.get_fitness(goal.goal_id)})."
            )
        with self._lock:
            incumbent_id = self._slots.get(goal.goal_id)
            if incumbent_id is not None:
                if incumbent_id == candidate.candidate_id:
                    return False
                if not self._is_better(candidate, self._arena[incumbent_id]):
                    return False
                self._release(incumbent_id)
                _logger().debug(
                    "Goal %s: candidate %s replaces %s",
                    goal.goal_id,
                    candidate.candidate_id,
                    incumbent_id,
                )
            self._slots[goal.goal_id] = candidate.candidate_id
            self._arena[candidate.candidate_id] = candidate
            self._refs[candidate.candidate_id] = self._refs.get(candidate.candidate_id, 0) + 1
            return True

    def _release(self, candidate_id: int) -> None:
        self._refs[candidate_id] -= 1
        if self._refs[candidate_id] == 0:
            del self._refs[candidate_id]
            del self._arena[candidate_id]

    def get_solutions(self) -> list[Candidate]:
        """Distinct archived candidates, ordered by candidate id."""
        with self._lock:
            return [self._arena[cid] for cid in sorted(self._arena)]

    def solution_for(self, goal: Goal | str) -> Candidate | None:
        goal_id = goal.goal_id if isinstance(goal, Goal) else goal
        with self._lock:
            cid = self._slots.get(goal_id)
            return self._arena[cid] if cid is not None else None

    @property
    def covered_goal_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._slots)

    def reset(self) -> None:
        with self._lock:
            self._slots.clear()
            self._arena.clear()
            self._refs.clear()

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, goal: object) -> bool:
        goal_id = goal.goal_id if isinstance(goal, Goal) else goal
        return goal_id in self._slots


__all__ = ["CoverageArchive", "ARCHIVE_POLICIES", "prefer_shorter", "keep_first", "resolve_policy"]
