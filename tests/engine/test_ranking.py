from __future__ import annotations

import numpy as np
import pytest

from covevo.engine.algorithm.components.ranking import (
    Fronts,
    NonDominatedSorting,
    PreferenceSorting,
    dominates,
    resolve_ranking,
)
from covevo.foundation.exceptions import InvalidComponentError
from covevo.foundation.goals import Goal

from conftest import with_fitness

GOALS = [Goal(f"g{i}") for i in range(4)]


def _random_candidates(n: int, seed: int):
    rng = np.random.default_rng(seed)
    candidates = []
    for _ in range(n):
        values = {g.goal_id: float(rng.integers(0, 5)) for g in GOALS}
        if rng.random() < 0.2:
            values["g3"] = float("inf")
        candidates.append(with_fitness(values, size=int(rng.integers(1, 10))))
    return candidates


def _assert_valid_fronts(fronts: Fronts, candidates, goals):
    flat = [cand for front in fronts for cand in front]
    assert len(flat) == len(candidates)
    assert len({cand.candidate_id for cand in flat}) == len(candidates)
    assert all(len(front) > 0 for front in fronts)
    for i, front_i in enumerate(fronts):
        for front_j in list(fronts)[i + 1 :]:
            for a in front_i:
                for b in front_j:
                    assert not dominates(b, a, goals)


@pytest.mark.parametrize("ranking_cls", [NonDominatedSorting, PreferenceSorting])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_fronts_complete_and_non_dominated(ranking_cls, seed):
    candidates = _random_candidates(30, seed)
    fronts = ranking_cls().compute_ranking(candidates, GOALS)
    _assert_valid_fronts(fronts, candidates, GOALS)


@pytest.mark.parametrize("seed", [3, 4])
def test_later_fronts_are_dominated_by_earlier_ones(seed):
    candidates = _random_candidates(25, seed)
    fronts = NonDominatedSorting().compute_ranking(candidates, GOALS)
    for i in range(1, fronts.number_of_subfronts):
        earlier = [c for front in list(fronts)[:i] for c in front]
        for b in fronts.subfront(i):
            assert any(dominates(a, b, GOALS) for a in earlier)


def test_ranking_uses_only_given_goals():
    a = with_fitness({"g0": 0.0, "g1": 5.0})
    b = with_fitness({"g0": 1.0, "g1": 0.0})
    ranking = NonDominatedSorting()

    only_g0 = ranking.compute_ranking([a, b], [Goal("g0")])
    assert only_g0.subfront(0) == [a]
    assert only_g0.rank_of(b) == 1

    both = ranking.compute_ranking([a, b], [Goal("g0"), Goal("g1")])
    assert both.sizes() == (2,)


def test_ranking_is_deterministic():
    candidates = _random_candidates(20, 9)
    ranking = NonDominatedSorting()
    first = [[c.candidate_id for c in front] for front in ranking.compute_ranking(candidates, GOALS)]
    again = [[c.candidate_id for c in front] for front in ranking.compute_ranking(candidates, set(GOALS))]
    assert first == again


def test_members_keep_input_order():
    a = with_fitness({"g0": 1.0})
    b = with_fitness({"g0": 1.0})
    c = with_fitness({"g0": 0.0})
    fronts = NonDominatedSorting().compute_ranking([a, b, c], [Goal("g0")])
    assert fronts.subfront(0) == [c]
    assert fronts.subfront(1) == [a, b]


def test_empty_inputs():
    ranking = NonDominatedSorting()
    assert ranking.compute_ranking([], GOALS).number_of_subfronts == 0
    cands = _random_candidates(3, 0)
    no_goals = ranking.compute_ranking(cands, [])
    assert no_goals.sizes() == (3,)


def test_duplicate_candidates_rejected():
    cand = with_fitness({"g0": 1.0})
    with pytest.raises(ValueError):
        NonDominatedSorting().compute_ranking([cand, cand], GOALS)


def test_fronts_accessors():
    a, b = with_fitness({"g0": 0.0}), with_fitness({"g0": 1.0})
    fronts = Fronts(((a,), (b,)))
    assert fronts.subfront(5) == []
    assert fronts.subfront(-1) == []
    assert fronts.rank_of(b) == 1
    assert len(fronts) == 2


def test_preference_front_zero_holds_best_per_goal():
    goals = [Goal("g0"), Goal("g1"), Goal("g2")]
    best_g0 = with_fitness({"g0": 0.5, "g1": 9.0, "g2": 9.0}, size=5)
    best_g1 = with_fitness({"g0": 9.0, "g1": 0.5, "g2": 9.0}, size=5)
    long_g2 = with_fitness({"g0": 8.0, "g1": 8.0, "g2": 1.0}, size=10)
    short_g2 = with_fitness({"g0": 8.0, "g1": 8.0, "g2": 1.0}, size=3)
    middling = with_fitness({"g0": 2.0, "g1": 2.0, "g2": 2.0}, size=1)

    candidates = [best_g0, best_g1, long_g2, short_g2, middling]
    fronts = PreferenceSorting().compute_ranking(candidates, goals)
    assert fronts.subfront(0) == [best_g0, best_g1, short_g2]
    assert set(fronts.subfront(1)) == {long_g2, middling}
    _assert_valid_fronts(fronts, candidates, goals)


def test_preference_ties_prefer_non_dominated_member():
    goals = [Goal("g0"), Goal("g1")]
    dominated = with_fitness({"g0": 0.0, "g1": 5.0}, size=1)
    dominant = with_fitness({"g0": 0.0, "g1": 1.0}, size=9)
    fronts = PreferenceSorting().compute_ranking([dominated, dominant], goals)
    assert fronts.subfront(0) == [dominant]
    assert fronts.subfront(1) == [dominated]


def test_preference_later_front_need_not_be_dominated():
    goals = [Goal("g0"), Goal("g1")]
    a = with_fitness({"g0": 0.0, "g1": 9.0})
    b = with_fitness({"g0": 9.0, "g1": 0.0})
    c = with_fitness({"g0": 4.0, "g1": 4.0})
    fronts = PreferenceSorting().compute_ranking([a, b, c], goals)
    assert fronts.sizes() == (2, 1)
    assert fronts.subfront(1) == [c]
    assert not any(dominates(x, c, goals) for x in fronts.subfront(0))
    _assert_valid_fronts(fronts, [a, b, c], goals)


def test_resolve_ranking():
    assert isinstance(resolve_ranking("non_dominated"), NonDominatedSorting)
    assert isinstance(resolve_ranking("Preference"), PreferenceSorting)
    with pytest.raises(InvalidComponentError):
        resolve_ranking("lexicographic")
