# algorithm/dynamosa/initialization.py
"""
Setup helpers for DynaMOSA: component resolution and the initial population.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from covevo.engine.algorithm.components.diversity import DiversityEstimator, resolve_diversity
from covevo.engine.algorithm.components.ranking import RankingFunction, resolve_ranking
from covevo.engine.algorithm.components.termination import SearchBudget
from covevo.engine.algorithm.config import DynaMOSAConfigData
from covevo.foundation.candidate import Candidate
from covevo.foundation.kernel import KernelBackend, resolve_kernel
from covevo.foundation.protocols import CandidateFactory


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def setup_operators(
    cfg: DynaMOSAConfigData,
    kernel: KernelBackend | None = None,
) -> tuple[KernelBackend, RankingFunction, DiversityEstimator]:
    """Resolve the kernel and the ranking / diversity components named in ``cfg``."""
    kernel = kernel or resolve_kernel(cfg.engine)
    return kernel, resolve_ranking(cfg.ranking, kernel), resolve_diversity(cfg.diversity, kernel)


def setup_budget(cfg: DynaMOSAConfigData) -> SearchBudget:
    return SearchBudget(
        max_evaluations=cfg.max_evaluations,
        max_generations=cfg.max_generations,
        max_time=cfg.max_time,
    )


def setup_population(
    factory: CandidateFactory,
    pop_size: int,
    initial_population: Sequence[Candidate] | None = None,
) -> list[Candidate]:
    """
    Use the supplied population when given, otherwise create ``pop_size``
    candidates through the factory.
    """
    if initial_population is not None:
        population = list(initial_population)
        if not population:
            raise ValueError("initial population is empty.")
        if len({cand.candidate_id for cand in population}) != len(population):
            raise ValueError("initial population contains duplicate candidates.")
        if len(population) != pop_size:
            _logger().info("Initial population has %d members (pop_size=%d)", len(population), pop_size)
        return population
    return [factory.create() for _ in range(pop_size)]


def notify_budget(budget: Any, event: str) -> None:
    """Forward a lifecycle event to budgets that track it (custom predicates may not)."""
    hook = getattr(budget, event, None)
    if callable(hook):
        hook()


__all__ = ["setup_operators", "setup_budget", "setup_population", "notify_budget"]
