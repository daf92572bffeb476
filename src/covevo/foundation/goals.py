"""
Coverage goals and their dependency graph.

A goal becomes eligible for optimisation only once every goal it depends on
has been covered. Dependencies are stored as goal identifiers so inventories
can be built in any order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .exceptions import DuplicateGoalError, UnknownDependencyError


@dataclass(frozen=True, order=True)
class Goal:
    """A single testable objective. Identity and ordering use ``goal_id`` only."""

    goal_id: str
    dependencies: frozenset[str] = field(default=frozenset(), compare=False)
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.dependencies, frozenset):
            object.__setattr__(self, "dependencies", frozenset(self.dependencies))
        if self.goal_id in self.dependencies:
            raise ValueError(f"goal '{self.goal_id}' cannot depend on itself.")

    def is_unlocked(self, covered: Iterable[str]) -> bool:
        """True when every dependency is in ``covered``."""
        covered_ids = covered if isinstance(covered, (set, frozenset)) else set(covered)
        return self.dependencies <= covered_ids

    def __str__(self) -> str:
        return self.goal_id


def index_goals(goals: Iterable[Goal]) -> dict[str, Goal]:
    """
    Map goal ids to goals, validating the inventory.

    Raises
    ------
    DuplicateGoalError
        If an id appears twice.
    UnknownDependencyError
        If a goal references an id missing from the inventory.
    """
    index: dict[str, Goal] = {}
    for goal in goals:
        if goal.goal_id in index:
            raise DuplicateGoalError(goal.goal_id)
        index[goal.goal_id] = goal
    for goal in index.values():
        missing = sorted(goal.dependencies - index.keys())
        if missing:
            raise UnknownDependencyError(goal.goal_id, missing)
    return dict(sorted(index.items()))


def dependents_of(index: Mapping[str, Goal]) -> dict[str, tuple[str, ...]]:
    """Reverse dependency edges: goal id -> ids of goals that depend on it (sorted)."""
    children: dict[str, list[str]] = {goal_id: [] for goal_id in index}
    for goal in index.values():
        for dep in goal.dependencies:
            children[dep].append(goal.goal_id)
    return {goal_id: tuple(sorted(kids)) for goal_id, kids in children.items()}


def unreachable_goals(index: Mapping[str, Goal]) -> frozenset[str]:
    """
    Goals that can never become eligible, i.e. those on or behind a dependency cycle.

    Runs a Kahn-style sweep assuming every eligible goal eventually gets covered.
    """
    reachable: set[str] = set()
    frontier = [goal_id for goal_id, goal in index.items() if not goal.dependencies]
    children = dependents_of(index)
    while frontier:
        goal_id = frontier.pop()
        if goal_id in reachable:
            continue
        reachable.add(goal_id)
        for child in children[goal_id]:
            if child not in reachable and index[child].dependencies <= reachable:
                frontier.append(child)
    return frozenset(index.keys() - reachable)


__all__ = ["Goal", "index_goals", "dependents_of", "unreachable_goals"]
