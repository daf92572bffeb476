"""Search algorithms and their shared components."""

from .config import DynaMOSAConfig, DynaMOSAConfigData
from .dynamosa import DynaMOSA, SearchResult

__all__ = ["DynaMOSA", "DynaMOSAConfig", "DynaMOSAConfigData", "SearchResult"]
