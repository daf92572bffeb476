"""DynaMOSA configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from covevo.foundation.exceptions import ConfigurationError

from .base import _SerializableConfig, _require_fields

_BUDGET_FIELDS = ("max_evaluations", "max_generations", "max_time")


@dataclass(frozen=True)
class DynaMOSAConfigData(_SerializableConfig):
    pop_size: int
    offspring_size: Optional[int] = None
    max_evaluations: Optional[int] = None
    max_generations: Optional[int] = None
    max_time: Optional[float] = None
    ranking: str = "non_dominated"
    diversity: str = "subvector_dominance"
    archive_policy: str = "shortest"
    refine_covered_goals: bool = True
    stop_on_full_coverage: bool = True
    eval_backend: str = "serial"
    n_workers: Optional[int] = None
    engine: str = "numpy"
    seed: Optional[int] = None

    @property
    def effective_offspring_size(self) -> int:
        return self.offspring_size or self.pop_size


class DynaMOSAConfig:
    """
    Declarative configuration holder for DynaMOSA.
    Provides a fluent builder that yields an immutable DynaMOSAConfigData.

    Examples:
        # Fluent builder
        cfg = DynaMOSAConfig().pop_size(50).max_generations(100).ranking("preference").fixed()

        # Quick default configuration
        cfg = DynaMOSAConfig.default()

        # From dictionary
        cfg = DynaMOSAConfig.from_dict({"pop_size": 50, "max_evaluations": 10_000})
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(
        cls,
        pop_size: int = 50,
        max_generations: int = 500,
        engine: str = "numpy",
    ) -> DynaMOSAConfigData:
        """
        Create a default DynaMOSA configuration.

        Args:
            pop_size: Population size (default: 50)
            max_generations: Generation budget (default: 500)
            engine: Kernel backend (default: "numpy")

        Returns:
            Frozen DynaMOSAConfigData ready to use
        """
        return cls().pop_size(pop_size).max_generations(max_generations).engine(engine).fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> DynaMOSAConfigData:
        """
        Create configuration from a dictionary of DynaMOSAConfigData fields.

        Unknown keys raise ConfigurationError so typos do not pass silently.
        """
        builder = cls()
        known = set(DynaMOSAConfigData.__dataclass_fields__)
        unknown = sorted(set(config) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown DynaMOSA configuration keys: {', '.join(unknown)}.",
                suggestion=f"Valid keys: {', '.join(sorted(known))}",
            )
        for key, value in config.items():
            getattr(builder, key)(value)
        return builder.fixed()

    def pop_size(self, value: int) -> "DynaMOSAConfig":
        if value <= 0:
            raise ValueError("population size must be positive.")
        self._cfg["pop_size"] = int(value)
        return self

    def offspring_size(self, value: int | None) -> "DynaMOSAConfig":
        if value is not None and value <= 0:
            raise ValueError("offspring size must be positive.")
        self._cfg["offspring_size"] = value
        return self

    def max_evaluations(self, value: int | None) -> "DynaMOSAConfig":
        self._cfg["max_evaluations"] = None if value is None else int(value)
        return self

    def max_generations(self, value: int | None) -> "DynaMOSAConfig":
        self._cfg["max_generations"] = None if value is None else int(value)
        return self

    def max_time(self, seconds: float | None) -> "DynaMOSAConfig":
        self._cfg["max_time"] = None if seconds is None else float(seconds)
        return self

    def ranking(self, method: str) -> "DynaMOSAConfig":
        """Set the ranking function: 'non_dominated' or 'preference'."""
        self._cfg["ranking"] = method
        return self

    def diversity(self, method: str) -> "DynaMOSAConfig":
        """Set the diversity estimator: 'subvector_dominance' or 'crowding'."""
        self._cfg["diversity"] = method
        return self

    def archive_policy(self, method: str) -> "DynaMOSAConfig":
        """Set the archive replacement policy: 'shortest' or 'first'."""
        self._cfg["archive_policy"] = method
        return self

    def refine_covered_goals(self, enabled: bool = True) -> "DynaMOSAConfig":
        self._cfg["refine_covered_goals"] = bool(enabled)
        return self

    def stop_on_full_coverage(self, enabled: bool = True) -> "DynaMOSAConfig":
        self._cfg["stop_on_full_coverage"] = bool(enabled)
        return self

    def eval_backend(self, value: str) -> "DynaMOSAConfig":
        self._cfg["eval_backend"] = value
        return self

    def n_workers(self, value: int | None) -> "DynaMOSAConfig":
        self._cfg["n_workers"] = value
        return self

    def engine(self, value: str) -> "DynaMOSAConfig":
        self._cfg["engine"] = value
        return self

    def seed(self, value: int | None) -> "DynaMOSAConfig":
        self._cfg["seed"] = value
        return self

    def fixed(self) -> DynaMOSAConfigData:
        _require_fields(self._cfg, ("pop_size",), "DynaMOSA")
        if all(self._cfg.get(name) is None for name in _BUDGET_FIELDS):
            raise ConfigurationError(
                "DynaMOSA needs a search budget.",
                suggestion="Set at least one of max_evaluations, max_generations or max_time",
            )
        return DynaMOSAConfigData(**self._cfg)


__all__ = ["DynaMOSAConfig", "DynaMOSAConfigData"]
