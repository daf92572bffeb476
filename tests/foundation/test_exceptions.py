"""Tests for the covevo exception hierarchy."""

from __future__ import annotations

import pytest

from covevo.foundation.exceptions import (
    ConfigurationError,
    CovevoError,
    EvaluationError,
    FatalEvaluationError,
    InvalidComponentError,
    InvariantViolationError,
    MissingConfigError,
    OptimizationError,
)


def test_message_includes_suggestion():
    err = CovevoError("Something broke", suggestion="Try again")
    assert "Something broke" in str(err)
    assert "Suggestion: Try again" in str(err)
    assert err.details == {}


def test_invalid_component_lists_options():
    err = InvalidComponentError("ranking", "fancy", ["non_dominated", "preference"])
    assert "Unknown ranking 'fancy'" in str(err)
    assert "non_dominated, preference" in str(err)
    assert err.details["name"] == "fancy"
    assert isinstance(err, ConfigurationError)


def test_missing_config_points_to_defaults():
    err = MissingConfigError("pop_size", config_class="DynaMOSAConfig")
    assert "pop_size" in str(err)
    assert "DynaMOSAConfig.default()" in str(err)


@pytest.mark.parametrize(
    "exc_cls",
    [ConfigurationError, OptimizationError, EvaluationError, FatalEvaluationError, InvariantViolationError],
)
def test_hierarchy_roots_at_covevo_error(exc_cls):
    assert issubclass(exc_cls, CovevoError)


def test_fatal_evaluation_is_an_evaluation_error():
    err = FatalEvaluationError("subject crashed", candidate_id=3, goal_id="g")
    assert isinstance(err, EvaluationError)
    assert err.details == {"candidate_id": 3, "goal_id": "g"}


def test_invariant_violation_carries_state():
    err = InvariantViolationError("broken", {"covered": ["a"]})
    assert err.details["covered"] == ["a"]
    with pytest.raises(OptimizationError):
        raise err
