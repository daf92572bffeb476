from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any

from covevo.foundation.observer import GenerationSnapshot, RunContext


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class JsonlStorageObserver:
    """
    Observer that persists one JSON object per generation to a ``.jsonl``
    file, followed by a final ``summary`` record.

    Every record carries an ``event`` key: ``start``, ``generation`` or
    ``summary``.
    """

    def __init__(self, path: str | Path, *, include_fitness: bool = False) -> None:
        self.path = Path(path)
        self.include_fitness = include_fitness
        self._fh: IO[str] | None = None

    def _write(self, record: dict[str, Any]) -> None:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8")
        self._fh.write(json.dumps(record, sort_keys=True, default=str))
        self._fh.write("\n")
        self._fh.flush()

    def on_start(self, ctx: RunContext) -> None:
        config = ctx.config.to_dict() if hasattr(ctx.config, "to_dict") else {}
        self._write(
            {
                "event": "start",
                "algorithm": ctx.algorithm_name,
                "engine": ctx.engine_name,
                "total_goals": ctx.total_goals,
                "initial_goals": ctx.initial_goals,
                "config": config,
            }
        )

    def on_generation(self, snapshot: GenerationSnapshot) -> None:
        record = snapshot.to_dict()
        if not self.include_fitness:
            record.pop("fitness", None)
        record["event"] = "generation"
        self._write(record)

    def on_end(self, result: Any) -> None:
        try:
            if result is not None:
                record = result.to_dict()
                record["event"] = "summary"
                self._write(record)
                _logger().info("Search trace written to %s", self.path)
        finally:
            self.close()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


def read_trace(path: str | Path) -> list[dict[str, Any]]:
    """Load the records of a trace written by JsonlStorageObserver."""
    with Path(path).open("r", encoding="utf-8") as fh:
        return [json.loads(line) for line in fh if line.strip()]


__all__ = ["JsonlStorageObserver", "read_trace"]
