"""
Config loading utilities shared by scripts and programmatic entrypoints.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from covevo.engine.algorithm.config import DynaMOSAConfig, DynaMOSAConfigData
from covevo.foundation.exceptions import ConfigurationError


def load_search_spec(path: str | Path) -> Dict[str, Any]:
    """
    Load a YAML or JSON search specification.
    """
    spec_path = Path(path).expanduser().resolve()
    if not spec_path.exists():
        raise FileNotFoundError(f"Config file '{spec_path}' does not exist.")
    suffix = spec_path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise ImportError("YAML config requested but PyYAML is not installed. Install with 'pip install covevo[yaml]'.") from exc
        with spec_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    else:
        with spec_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file '{spec_path}' must contain a mapping at the top level.",
            details={"type": type(data).__name__},
        )
    return data


def config_from_spec(spec: Mapping[str, Any], **overrides: Any) -> DynaMOSAConfigData:
    """
    Build a frozen DynaMOSA configuration from a loaded search file.

    Settings are read from a ``dynamosa`` section when present, otherwise
    from the top level. Keyword overrides win over file values.
    """
    section = spec.get("dynamosa", spec)
    if not isinstance(section, Mapping):
        raise ConfigurationError("The 'dynamosa' section must be a mapping.")
    merged = {**section, **overrides}
    return DynaMOSAConfig.from_dict(merged)


__all__ = ["load_search_spec", "config_from_spec"]
