from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from covevo.engine.algorithm.components.archive import CoverageArchive
from covevo.engine.algorithm.components.goals_manager import GoalManager
from covevo.engine.algorithm.components.termination import SearchBudget
from covevo.foundation.candidate import Candidate
from covevo.foundation.exceptions import FatalEvaluationError, InvariantViolationError
from covevo.foundation.goals import Goal

from conftest import CHAIN_TARGETS, TargetEvaluator, chain_goals, covering


def _ids(goals):
    return sorted(goal.goal_id for goal in goals)


def test_roots_start_current(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    assert _ids(gm.current_goals) == ["reach_05"]
    assert _ids(gm.uncovered_goals) == ["reach_05", "reach_10", "reach_15", "reach_20"]
    assert gm.covered_goals == frozenset()
    assert gm.total_goals == 4
    assert [g.goal_id for g in gm.all_goals] == ["reach_05", "reach_10", "reach_15", "reach_20"]


def test_covering_unlocks_dependents(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    cand = Candidate(5, size=5)
    gm.evaluate(cand)

    assert gm.partition() == {
        "covered": ["reach_05"],
        "current": ["reach_10"],
        "uncovered": ["reach_10", "reach_15", "reach_20"],
    }
    assert gm.archive.solution_for("reach_05") is cand
    # Newly unlocked goals are scored in the same call.
    assert cand.get_fitness("reach_10") == 5.0
    assert not cand.has_fitness("reach_15")


def test_unlocked_goal_covered_in_same_call():
    targets = {"a": 3, "b": 3, "c": 4}
    goals = [Goal("a"), Goal("b", frozenset({"a"})), Goal("c", frozenset({"b"}))]
    gm = GoalManager(goals, TargetEvaluator(targets))
    gm.evaluate(Candidate(3))
    assert gm.partition()["covered"] == ["a", "b"]
    assert gm.partition()["current"] == ["c"]


def test_goal_with_several_dependencies_waits_for_all():
    targets = {"left": 1, "right": 2, "join": 9}
    goals = [Goal("left"), Goal("right"), Goal("join", frozenset({"left", "right"}))]
    gm = GoalManager(goals, TargetEvaluator(targets))
    gm.evaluate(Candidate(1))
    assert "join" not in gm.partition()["current"]
    gm.evaluate(Candidate(2))
    assert gm.partition()["current"] == ["join"]


def test_repeated_evaluation_is_idempotent(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    cand = Candidate(5, size=5)
    gm.evaluate(cand)
    calls = evaluator.calls
    before = gm.partition()
    gm.evaluate(cand)
    assert evaluator.calls == calls
    assert gm.partition() == before
    assert gm.archive.get_solutions() == [cand]


def test_evaluation_is_noop_once_budget_is_exhausted(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    budget = SearchBudget(max_evaluations=1)
    budget.start()
    gm.evaluate(Candidate(7), budget)
    assert budget.evaluations == 1

    late = Candidate(5)
    gm.evaluate(late, budget)
    assert not late.evaluated
    assert late.fitness_values == {}
    assert gm.covered_goals == frozenset()
    assert budget.evaluations == 1


def test_budget_charged_once_per_candidate(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    budget = SearchBudget(max_evaluations=10)
    cand = Candidate(3)
    gm.evaluate(cand, budget)
    gm.evaluate(cand, budget)
    assert budget.evaluations == 1


def test_evaluator_errors_become_inf(caplog):
    class Flaky:
        def evaluate(self, candidate, goal):
            raise RuntimeError("subject timed out")

    gm = GoalManager([Goal("a")], Flaky())
    cand = Candidate(1)
    with caplog.at_level(logging.WARNING):
        gm.evaluate(cand)
    assert math.isinf(cand.get_fitness("a"))
    assert cand.has_fitness("a")
    assert gm.partition()["current"] == ["a"]
    assert "subject timed out" in caplog.text


@pytest.mark.parametrize("bad", [float("nan"), -1.0])
def test_invalid_distances_become_inf(bad, caplog):
    class Bad:
        def evaluate(self, candidate, goal):
            return bad

    gm = GoalManager([Goal("a")], Bad())
    cand = Candidate()
    with caplog.at_level(logging.WARNING):
        gm.evaluate(cand)
    assert math.isinf(cand.get_fitness("a"))
    assert "invalid distance" in caplog.text


def test_fatal_evaluation_error_propagates():
    class Fatal:
        def evaluate(self, candidate, goal):
            raise FatalEvaluationError("cannot load subject")

    gm = GoalManager([Goal("a")], Fatal())
    with pytest.raises(FatalEvaluationError):
        gm.evaluate(Candidate())


def test_refinement_swaps_in_smaller_candidate(goals):
    gm = GoalManager(goals, TargetEvaluator(CHAIN_TARGETS))
    big = Candidate(5, size=40)
    small = Candidate(5, size=2)
    gm.evaluate(big)
    gm.evaluate(small)
    assert gm.archive.solution_for("reach_05") is small


def test_no_refinement_keeps_first(goals):
    gm = GoalManager(goals, TargetEvaluator(CHAIN_TARGETS), refine_covered_goals=False)
    big = Candidate(5, size=40)
    small = Candidate(5, size=2)
    gm.evaluate(big)
    gm.evaluate(small)
    assert gm.archive.solution_for("reach_05") is big
    assert not small.has_fitness("reach_05")


def test_requires_empty_archive(goals, evaluator):
    archive = CoverageArchive()
    archive.record(Goal("reach_05"), covering(goals=["reach_05"]))
    with pytest.raises(ValueError, match="empty archive"):
        GoalManager(goals, evaluator, archive)


def test_check_invariants_reports_state(goals, evaluator):
    gm = GoalManager(goals, evaluator)
    gm.evaluate(Candidate(5))
    gm.check_invariants()

    gm.archive.reset()
    with pytest.raises(InvariantViolationError) as exc:
        gm.check_invariants()
    assert exc.value.details["covered"] == ["reach_05"]
    assert exc.value.details["archive"] == []


def test_cycle_goals_logged_as_unreachable(evaluator, caplog):
    goals = [Goal("reach_05"), Goal("loop_a", frozenset({"loop_b"})), Goal("loop_b", frozenset({"loop_a"}))]
    with caplog.at_level(logging.WARNING):
        GoalManager(goals, TargetEvaluator({"reach_05": 5, "loop_a": 1, "loop_b": 2}))
    assert "loop_a, loop_b" in caplog.text


def test_partition_invariant_under_random_evaluations():
    gm = GoalManager(chain_goals(), TargetEvaluator(CHAIN_TARGETS))
    rng = np.random.default_rng(11)
    covered_sizes = []
    for x in [*rng.integers(0, 25, size=200), 5]:
        gm.evaluate(Candidate(int(x), size=int(x)))
        part = gm.partition()
        current, uncovered, covered = set(part["current"]), set(part["uncovered"]), set(part["covered"])
        assert current <= uncovered
        assert not uncovered & covered
        assert uncovered | covered == set(CHAIN_TARGETS)
        assert gm.archive.covered_goal_ids == covered
        covered_sizes.append(len(covered))
    assert covered_sizes == sorted(covered_sizes)
    assert covered_sizes[-1] > 0
