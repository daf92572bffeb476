from __future__ import annotations

import logging
from typing import Any

from covevo.foundation.observer import GenerationSnapshot, RunContext


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class LoggingObserver:
    """
    Observer that reports run progress through the log.

    Counts go to INFO. The goal, archive, population and offspring identities
    of each generation, and every population member's goal distances, go to
    DEBUG.
    """

    def __init__(self, every: int = 1) -> None:
        if every <= 0:
            raise ValueError("every must be a positive integer.")
        self.every = int(every)

    def on_start(self, ctx: RunContext) -> None:
        cfg = ctx.config
        _logger().info("%s", "=" * 80)
        _logger().info("Algorithm: %s", ctx.algorithm_name.upper())
        _logger().info("Backend: %s", ctx.engine_name)
        _logger().info("Goals: %d (initially current: %d)", ctx.total_goals, ctx.initial_goals)
        _logger().info("Population size: %s", getattr(cfg, "pop_size", "?"))
        _logger().info("Ranking: %s | Diversity: %s", getattr(cfg, "ranking", "?"), getattr(cfg, "diversity", "?"))
        _logger().info("%s", "-" * 80)

    def on_generation(self, snapshot: GenerationSnapshot) -> None:
        if snapshot.generation % self.every == 0:
            counts = snapshot.counts()
            _logger().info(
                "gen %d | evals %d | covered %d | current %d | uncovered %d | archive %d",
                snapshot.generation,
                snapshot.evaluations,
                counts["covered"],
                counts["current"],
                counts["uncovered"],
                counts["archive"],
            )
        if _logger().isEnabledFor(logging.DEBUG):
            _logger().debug("Covered goals = %s", ", ".join(snapshot.covered))
            _logger().debug("Current goals = %s", ", ".join(snapshot.current))
            _logger().debug("Uncovered goals = %s", ", ".join(snapshot.uncovered))
            _logger().debug("Archive = %s", list(snapshot.archive))
            _logger().debug("Population = %s | front sizes = %s", list(snapshot.population), list(snapshot.front_sizes))
            _logger().debug("Offspring = %s", list(snapshot.offspring))
            for cid, values in snapshot.fitness.items():
                _logger().debug(
                    "Candidate %d goals: %s",
                    cid,
                    ", ".join("%s=%g" % (goal_id, values[goal_id]) for goal_id in sorted(values)),
                )

    def on_end(self, result: Any) -> None:
        if result is None:
            return
        _logger().info(
            "%s -> Generations: %d | Evaluations: %d | Coverage: %.2f%% (%d / %d) | Time: %.2f s",
            "DYNAMOSA",
            result.generations,
            result.evaluations,
            100.0 * result.coverage,
            len(result.covered_goals),
            result.total_goals,
            result.elapsed_s,
        )


__all__ = ["LoggingObserver"]
