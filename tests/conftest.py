"""Toy collaborators shared by the test suite.

Candidates carry an integer payload; goal ``reach_k`` is covered by a candidate
whose payload equals ``k`` and its distance is ``|payload - k|``.
"""

from __future__ import annotations

import threading

import numpy as np
import pytest

from covevo.foundation.candidate import Candidate
from covevo.foundation.goals import Goal

CHAIN_TARGETS = {"reach_05": 5, "reach_10": 10, "reach_15": 15, "reach_20": 20}


class TargetEvaluator:
    """Distance to an integer target; counts calls so tests can check caching."""

    def __init__(self, targets: dict[str, int]):
        self.targets = dict(targets)
        self.calls = 0
        self._lock = threading.Lock()

    def evaluate(self, candidate: Candidate, goal: Goal) -> float:
        with self._lock:
            self.calls += 1
        return float(abs(candidate.payload - self.targets[goal.goal_id]))


class IntFactory:
    def __init__(self, low: int = 0, high: int = 30, seed: int = 0):
        self.low = low
        self.high = high
        self.rng = np.random.default_rng(seed)

    def create(self) -> Candidate:
        x = int(self.rng.integers(self.low, self.high + 1))
        return Candidate(x, size=x)


def int_variation(a: Candidate, b: Candidate, rng: np.random.Generator) -> list[Candidate]:
    children = []
    for parent in (a, b):
        x = int(np.clip(parent.payload + rng.integers(-3, 4), 0, 30))
        children.append(parent.derive(x, size=x))
    return children


def chain_goals() -> list[Goal]:
    return [
        Goal("reach_05"),
        Goal("reach_10", frozenset({"reach_05"})),
        Goal("reach_15", frozenset({"reach_10"})),
        Goal("reach_20", frozenset({"reach_15"})),
    ]


class RecordingObserver:
    def __init__(self):
        self.started = None
        self.snapshots = []
        self.result = None

    def on_start(self, ctx):
        self.started = ctx

    def on_generation(self, snapshot):
        self.snapshots.append(snapshot)

    def on_end(self, result):
        self.result = result


def covering(payload=None, *, size=None, goals=()) -> Candidate:
    """Candidate with distance 0.0 on ``goals``."""
    cand = Candidate(payload, size=size)
    for goal_id in goals:
        cand.set_fitness(goal_id, 0.0)
    return cand


def with_fitness(values: dict[str, float], *, size=None) -> Candidate:
    cand = Candidate(size=size)
    for goal_id, value in values.items():
        cand.set_fitness(goal_id, value)
    return cand


@pytest.fixture
def goals() -> list[Goal]:
    return chain_goals()


@pytest.fixture
def evaluator() -> TargetEvaluator:
    return TargetEvaluator(CHAIN_TARGETS)


@pytest.fixture
def factory() -> IntFactory:
    return IntFactory(seed=7)


@pytest.fixture
def variation():
    return int_variation
