"""Tests for the DynaMOSA config builder and file loading."""

from __future__ import annotations

import json

import pytest

from covevo.engine.algorithm.config import DynaMOSAConfig, DynaMOSAConfigData
from covevo.engine.config.loader import config_from_spec, load_search_spec
from covevo.foundation.exceptions import ConfigurationError, MissingConfigError


def test_fluent_builder():
    cfg = (
        DynaMOSAConfig()
        .pop_size(20)
        .offspring_size(10)
        .max_evaluations(1_000)
        .ranking("preference")
        .diversity("crowding")
        .archive_policy("first")
        .eval_backend("thread")
        .n_workers(2)
        .seed(3)
        .fixed()
    )
    assert isinstance(cfg, DynaMOSAConfigData)
    assert cfg.pop_size == 20
    assert cfg.effective_offspring_size == 10
    assert cfg.ranking == "preference"
    assert cfg.refine_covered_goals is True
    assert cfg.stop_on_full_coverage is True


def test_default_config():
    cfg = DynaMOSAConfig.default()
    assert cfg.pop_size == 50
    assert cfg.max_generations == 500
    assert cfg.engine == "numpy"
    assert cfg.effective_offspring_size == 50


def test_roundtrip_through_dict_and_json():
    cfg = DynaMOSAConfig().pop_size(8).max_time(2.5).seed(1).fixed()
    assert DynaMOSAConfig.from_dict(cfg.to_dict()) == cfg
    assert json.loads(cfg.to_json())["max_time"] == 2.5


def test_config_is_frozen():
    cfg = DynaMOSAConfig.default()
    with pytest.raises(AttributeError):
        cfg.pop_size = 3  # type: ignore[misc]


def test_missing_pop_size():
    with pytest.raises(MissingConfigError):
        DynaMOSAConfig().max_generations(10).fixed()


def test_budget_required():
    with pytest.raises(ConfigurationError, match="budget"):
        DynaMOSAConfig().pop_size(10).fixed()


def test_unknown_keys_rejected():
    with pytest.raises(ConfigurationError, match="popsize"):
        DynaMOSAConfig.from_dict({"popsize": 10, "max_generations": 5})


@pytest.mark.parametrize("method,value", [("pop_size", 0), ("offspring_size", -1)])
def test_invalid_sizes(method, value):
    with pytest.raises(ValueError):
        getattr(DynaMOSAConfig(), method)(value)


def test_load_json_spec(tmp_path):
    path = tmp_path / "search.json"
    path.write_text(json.dumps({"dynamosa": {"pop_size": 12, "max_evaluations": 300}}), encoding="utf-8")
    spec = load_search_spec(path)
    cfg = config_from_spec(spec, seed=4)
    assert (cfg.pop_size, cfg.max_evaluations, cfg.seed) == (12, 300, 4)


def test_top_level_spec_without_section():
    cfg = config_from_spec({"pop_size": 5, "max_generations": 2})
    assert cfg.max_generations == 2


def test_load_yaml_spec(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "search.yaml"
    path.write_text("dynamosa:\n  pop_size: 6\n  max_generations: 4\n  ranking: preference\n", encoding="utf-8")
    cfg = config_from_spec(load_search_spec(path))
    assert cfg.ranking == "preference"
    assert cfg.pop_size == 6


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_search_spec(tmp_path / "nope.json")


def test_non_mapping_spec(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_search_spec(path)
