"""
Convenience entry point: configure and run one DynaMOSA search.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Union

from covevo.engine.algorithm.components.selection import TournamentBreeder
from covevo.engine.algorithm.components.termination import parse_termination
from covevo.engine.algorithm.config import DynaMOSAConfig, DynaMOSAConfigData
from covevo.engine.algorithm.dynamosa import DynaMOSA, SearchResult
from covevo.engine.config.loader import config_from_spec, load_search_spec
from covevo.foundation.candidate import Candidate
from covevo.foundation.eval import EvaluationBackend
from covevo.foundation.exceptions import ConfigurationError
from covevo.foundation.goals import Goal
from covevo.foundation.kernel import resolve_kernel
from covevo.foundation.logging import configure_covevo_logging
from covevo.foundation.observer import SearchObserver
from covevo.foundation.protocols import Breeder, CandidateFactory, FitnessEvaluator

ConfigLike = Union[DynaMOSAConfigData, Mapping[str, Any], str, Path, None]


def _resolve_config(config: ConfigLike, overrides: dict[str, Any]) -> DynaMOSAConfigData:
    if config is None:
        if not overrides:
            return DynaMOSAConfig.default()
        defaults = DynaMOSAConfig.default().to_dict()
        if any(key in overrides for key in ("max_evaluations", "max_time")):
            defaults["max_generations"] = None
        return DynaMOSAConfig.from_dict({**defaults, **overrides})
    if isinstance(config, DynaMOSAConfigData):
        if not overrides:
            return config
        return DynaMOSAConfig.from_dict({**config.to_dict(), **overrides})
    if isinstance(config, (str, Path)):
        return config_from_spec(load_search_spec(config), **overrides)
    if isinstance(config, Mapping):
        return config_from_spec(config, **overrides)
    raise ConfigurationError(
        f"Unsupported config type: {type(config).__name__}.",
        suggestion="Pass a DynaMOSAConfigData, a dict, or a path to a JSON/YAML file",
    )


def run_search(
    goals: Iterable[Goal],
    factory: CandidateFactory,
    breeder: Breeder | Any,
    evaluator: FitnessEvaluator,
    config: ConfigLike = None,
    *,
    observers: Iterable[SearchObserver] = (),
    initial_population: Sequence[Candidate] | None = None,
    eval_backend: EvaluationBackend | None = None,
    termination: tuple[str, Any] | None = None,
    verbose: bool = False,
    **overrides: Any,
) -> SearchResult:
    """
    Run a DynaMOSA search and return its result.

    Args:
        goals: The goal set with its dependency relation.
        factory: Creates random candidates for the initial population.
        breeder: A ``Breeder``, or a variation callable
            ``variation(parent_a, parent_b, rng) -> Sequence[Candidate]`` that
            is wrapped in a ``TournamentBreeder``.
        evaluator: Scores a candidate against one goal.
        config: Frozen config, dict, or path to a JSON/YAML file. Defaults to
            ``DynaMOSAConfig.default()``.
        observers: Search observers (see ``covevo.experiment.observers``).
        initial_population: Use these candidates instead of calling the factory.
        eval_backend: Override the backend named in the config.
        termination: Budget criterion ``(type, value)`` such as
            ``("max_evaluations", 5000)``; replaces the limits in the config.
        verbose: Attach a console handler to the "covevo" logger when logging
            is not configured yet.
        **overrides: Config fields that override the resolved config.

    Returns:
        SearchResult with the archived solutions and coverage statistics.

    Examples:
        >>> result = run_search(goals, factory, variation, evaluator, pop_size=20, max_evaluations=2000)
        >>> result.coverage
    """
    cfg = _resolve_config(config, overrides)
    if verbose:
        configure_covevo_logging()
    if not hasattr(breeder, "breed"):
        if not callable(breeder):
            raise ConfigurationError(
                "breeder must provide breed() or be a variation callable.",
                details={"type": type(breeder).__name__},
            )
        breeder = TournamentBreeder(
            breeder,
            offspring_size=cfg.effective_offspring_size,
            kernel=resolve_kernel(cfg.engine),
        )
    algorithm = DynaMOSA(
        cfg,
        goals,
        factory,
        breeder,
        evaluator,
        observers=observers,
        eval_backend=eval_backend,
        budget=parse_termination(termination) if termination is not None else None,
    )
    return algorithm.run(initial_population)


__all__ = ["run_search"]
