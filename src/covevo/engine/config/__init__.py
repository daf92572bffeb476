"""Configuration file loading."""

from .loader import config_from_spec, load_search_spec

__all__ = ["load_search_spec", "config_from_spec"]
