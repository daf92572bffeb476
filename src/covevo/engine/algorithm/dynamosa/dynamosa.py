# algorithm/dynamosa/dynamosa.py
"""
DynaMOSA many-objective search core.

This module contains the DynaMOSA class with the generational loop
(initialize/evolve/run). Only the goals whose dependencies are covered take
part in ranking; covering a goal archives its candidate and unlocks the goals
that depend on it.
- Setup logic: initialization.py
- State and results: state.py
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
import numpy as np

from covevo.engine.algorithm.components.archive import CoverageArchive
from covevo.engine.algorithm.components.diversity import DiversityEstimator
from covevo.engine.algorithm.components.goals_manager import GoalManager
from covevo.engine.algorithm.components.ranking import RankingFunction
from covevo.engine.algorithm.components.selection import environmental_selection
from covevo.engine.algorithm.config import DynaMOSAConfigData
from covevo.foundation.candidate import Candidate
from covevo.foundation.eval import EvaluationBackend
from covevo.foundation.eval.backends import resolve_eval_backend
from covevo.foundation.exceptions import InvariantViolationError
from covevo.foundation.goals import Goal
from covevo.foundation.kernel import KernelBackend
from covevo.foundation.observer import GenerationSnapshot, RunContext, SearchObserver
from covevo.foundation.protocols import Breeder, CandidateFactory, FitnessEvaluator, StoppingCondition

from .initialization import notify_budget, setup_budget, setup_operators, setup_population
from .state import DynaMOSAState, SearchResult, SearchStatus, build_result, build_snapshot


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class DynaMOSA:
    """
    Dynamic many-objective sorting algorithm.

    Parameters
    ----------
    config : DynaMOSAConfigData
        Frozen configuration (see ``DynaMOSAConfig``).
    goals : Iterable[Goal]
        The full goal set with its dependency relation.
    factory : CandidateFactory
        Creates the random initial population.
    breeder : Breeder
        Produces offspring from the ranked population.
    evaluator : FitnessEvaluator
        Scores a candidate against a single goal.
    observers : Iterable[SearchObserver]
        Receive the run context, one snapshot per generation and the result.
    budget : StoppingCondition | None
        Search budget; built from the config limits when omitted.
    """

    def __init__(
        self,
        config: DynaMOSAConfigData,
        goals: Iterable[Goal],
        factory: CandidateFactory,
        breeder: Breeder,
        evaluator: FitnessEvaluator,
        *,
        observers: Iterable[SearchObserver] = (),
        budget: StoppingCondition | None = None,
        eval_backend: EvaluationBackend | None = None,
        archive: CoverageArchive | None = None,
        ranking: RankingFunction | None = None,
        diversity: DiversityEstimator | None = None,
        kernel: KernelBackend | None = None,
    ) -> None:
        self.cfg = config
        self.kernel, default_ranking, default_diversity = setup_operators(config, kernel)
        self.ranking = ranking or default_ranking
        self.diversity = diversity or default_diversity
        self.archive = archive if archive is not None else CoverageArchive(config.archive_policy)
        self.budget = budget if budget is not None else setup_budget(config)
        self.eval_backend = eval_backend or resolve_eval_backend(config.eval_backend, n_workers=config.n_workers)
        self.factory = factory
        self.breeder = breeder
        self.evaluator = evaluator
        self.observers: list[SearchObserver] = list(observers)

        self._goals = tuple(goals)
        self.goals_manager: GoalManager | None = None
        self.status = SearchStatus.INITIALIZING
        self._st: DynaMOSAState | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, initial_population: Sequence[Candidate] | None = None) -> GenerationSnapshot:
        """
        Reset the archive, build the goal partition and evaluate the initial
        population. Returns the generation-0 snapshot.
        """
        self.status = SearchStatus.INITIALIZING
        self.archive.reset()
        gm = GoalManager(
            self._goals,
            self.evaluator,
            self.archive,
            refine_covered_goals=self.cfg.refine_covered_goals,
        )
        self.goals_manager = gm
        _logger().info("Initial number of goals = %d / %d", len(gm.current_goals), gm.total_goals)

        notify_budget(self.budget, "start")
        rng = np.random.default_rng(self.cfg.seed)
        population = setup_population(self.factory, self.cfg.pop_size, initial_population)
        self.eval_backend.evaluate(population, gm, self.budget)
        self._synchronize(population)

        goals = gm.current_goals
        fronts = self.ranking.compute_ranking(population, goals)
        diversity: dict[Candidate, float] = {}
        for front in fronts:
            diversity.update(self.diversity.assign(front, goals))
        self._st = DynaMOSAState(
            rng=rng,
            population=population,
            fronts=fronts,
            diversity=diversity,
        )
        gm.check_invariants()
        self.status = SearchStatus.RUNNING

        ctx = RunContext(
            algorithm=self,
            config=self.cfg,
            total_goals=gm.total_goals,
            initial_goals=len(goals),
            engine_name=self.cfg.engine,
        )
        for observer in self.observers:
            observer.on_start(ctx)
        return self._emit_generation()

    def evolve(self) -> GenerationSnapshot:
        """
        Run one generation: breed, evaluate the offspring, rank the union of
        parents and offspring on the current goals and keep the best
        ``max(pop_size, |front 0|)`` candidates.
        """
        st = self._require_running()
        gm = self.goals_manager
        assert gm is not None

        offspring = list(self.breeder.breed(st.population, st.fronts, st.diversity, st.rng))
        self.eval_backend.evaluate(offspring, gm, self.budget)

        # Breeders may hand back an unchanged parent; it competes once.
        union = list(dict.fromkeys([*st.population, *offspring]))
        if not union:
            raise InvariantViolationError("union of parents and offspring is empty", gm.partition())
        # Parents are scored lazily on goals unlocked since their evaluation.
        self._synchronize(union)

        goals = gm.current_goals
        _logger().debug("Union size = %d, current goals = %d", len(union), len(goals))
        fronts = self.ranking.compute_ranking(union, goals)
        outcome = environmental_selection(fronts, self.cfg.pop_size, goals, self.diversity)

        expected = min(len(union), max(self.cfg.pop_size, len(fronts.subfront(0))))
        if len(outcome.population) != expected:
            raise InvariantViolationError(
                f"next population has {len(outcome.population)} members, expected {expected}",
                {"front_sizes": list(fronts.sizes()), "pop_size": self.cfg.pop_size},
            )

        st.population = outcome.population
        st.fronts = fronts
        st.diversity = outcome.diversity
        st.offspring = offspring
        st.generation += 1
        notify_budget(self.budget, "notify_generation")
        gm.check_invariants()
        return self._emit_generation()

    def is_finished(self) -> bool:
        """True when the budget is spent, or when no goal is left to pursue."""
        if self.budget.is_finished():
            return True
        gm = self.goals_manager
        if self.cfg.stop_on_full_coverage and gm is not None and not gm.current_goals:
            return True
        return False

    def run(self, initial_population: Sequence[Candidate] | None = None) -> SearchResult:
        """Initialize, evolve until finished and return the result."""
        try:
            self.initialize(initial_population)
            while not self.is_finished():
                self.evolve()
        except Exception:
            self.eval_backend.close()
            raise
        return self.terminate()

    def terminate(self) -> SearchResult:
        """Close the evaluation backend, notify observers and build the result."""
        gm = self.goals_manager
        if gm is None:
            raise RuntimeError("DynaMOSA.terminate() called before initialize().")
        self.eval_backend.close()
        self.status = SearchStatus.TERMINATED
        result = build_result(self._st, gm, self.evaluations, float(getattr(self.budget, "elapsed", 0.0)))
        _logger().info(
            "Search finished after %d generations: covered %d / %d goals (%d evaluations)",
            result.generations,
            len(result.covered_goals),
            result.total_goals,
            result.evaluations,
        )
        for observer in self.observers:
            observer.on_end(result)
        return result

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._st.generation if self._st is not None else 0

    @property
    def evaluations(self) -> int:
        return int(getattr(self.budget, "evaluations", 0))

    @property
    def population(self) -> list[Candidate]:
        return list(self._st.population) if self._st is not None else []

    def get_solutions(self) -> list[Candidate]:
        return self.archive.get_solutions()

    def get_covered_goals(self) -> frozenset[Goal]:
        return self.goals_manager.covered_goals if self.goals_manager is not None else frozenset()

    def get_current_goals(self) -> frozenset[Goal]:
        return self.goals_manager.current_goals if self.goals_manager is not None else frozenset()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_running(self) -> DynaMOSAState:
        if self.status is not SearchStatus.RUNNING or self._st is None:
            raise RuntimeError(f"DynaMOSA.evolve() requires a running search (status: {self.status.value}).")
        return self._st

    def _synchronize(self, candidates: list[Candidate]) -> None:
        """Re-run evaluation until every candidate is scored on every current goal."""
        gm = self.goals_manager
        assert gm is not None
        while True:
            before = gm.current_goals
            self.eval_backend.evaluate(candidates, gm, self.budget)
            if gm.current_goals == before:
                return

    def _emit_generation(self) -> GenerationSnapshot:
        st = self._st
        gm = self.goals_manager
        assert st is not None and gm is not None
        snapshot = build_snapshot(st, gm, self.evaluations)
        counts = snapshot.counts()
        _logger().info(
            "Generation %d: covered goals = %d, current goals = %d, uncovered goals = %d, archive = %d",
            snapshot.generation,
            counts["covered"],
            counts["current"],
            counts["uncovered"],
            counts["archive"],
        )
        for observer in self.observers:
            observer.on_generation(snapshot)
        return snapshot


__all__ = ["DynaMOSA"]
