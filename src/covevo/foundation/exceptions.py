"""
covevo exception hierarchy.

Provides exceptions with helpful error messages and suggestions.
All covevo-specific exceptions inherit from CovevoError for easy catching.

Example:
    try:
        result = run_search(goals, factory, breeder, evaluator, config)
    except CovevoError as e:
        logger.error("Search failed: %s", e)
"""

from __future__ import annotations

from typing import Any


class CovevoError(Exception):
    """
    Base exception for all covevo errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CovevoError):
    """Raised when configuration is invalid or incomplete."""

    pass


class InvalidComponentError(ConfigurationError):
    """Raised when an unknown ranking, diversity, archive policy or backend is named."""

    def __init__(self, kind: str, name: str, available: list[str] | None = None) -> None:
        message = f"Unknown {kind} '{name}'."
        suggestion = f"Available {kind} options: {', '.join(available)}" if available else None
        super().__init__(message, suggestion, {"kind": kind, "name": name, "available": available or []})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, config_class: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if config_class:
            suggestion += f" or use {config_class}.default() for sensible defaults"
        super().__init__(message, suggestion, {"field": field})


# =============================================================================
# Goal Errors
# =============================================================================


class GoalError(CovevoError):
    """Base class for goal inventory errors."""

    pass


class DuplicateGoalError(GoalError):
    """Raised when two goals share the same identifier."""

    def __init__(self, goal_id: str) -> None:
        message = f"Goal '{goal_id}' appears more than once in the goal inventory."
        suggestion = "Goal identifiers must be unique"
        super().__init__(message, suggestion, {"goal_id": goal_id})


class UnknownDependencyError(GoalError):
    """Raised when a goal depends on an identifier missing from the inventory."""

    def __init__(self, goal_id: str, missing: list[str]) -> None:
        message = f"Goal '{goal_id}' depends on unknown goals: {', '.join(missing)}."
        suggestion = "Include every dependency in the goal inventory or drop the reference"
        super().__init__(message, suggestion, {"goal_id": goal_id, "missing": missing})


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(CovevoError):
    """Raised when the search fails during execution."""

    pass


class EvaluationError(OptimizationError):
    """Raised when a candidate cannot be scored against a goal."""

    def __init__(self, message: str, candidate_id: int | None = None, goal_id: str | None = None) -> None:
        suggestion = "Check your evaluator's evaluate() function for errors"
        super().__init__(message, suggestion, {"candidate_id": candidate_id, "goal_id": goal_id})


class FatalEvaluationError(EvaluationError):
    """
    Raised by an evaluator to abort the whole search.

    Ordinary evaluator exceptions are absorbed as unsatisfied distances; this
    one is propagated so a broken subject is never silently mis-scored.
    """

    pass


class InvariantViolationError(OptimizationError):
    """Raised when a structural invariant of the search is broken (programming error)."""

    def __init__(self, message: str, state: dict[str, Any] | None = None) -> None:
        suggestion = "This is a bug in the search engine or a custom component; the details hold the generational state"
        super().__init__(message, suggestion, state)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Base
    "CovevoError",
    # Configuration
    "ConfigurationError",
    "InvalidComponentError",
    "MissingConfigError",
    # Goals
    "GoalError",
    "DuplicateGoalError",
    "UnknownDependencyError",
    # Runtime
    "OptimizationError",
    "EvaluationError",
    "FatalEvaluationError",
    "InvariantViolationError",
]
