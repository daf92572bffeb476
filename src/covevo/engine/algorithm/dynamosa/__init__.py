"""
DynaMOSA: dynamic many-objective sorting for coverage-driven search.

Modules:
- dynamosa: DynaMOSA class with the generational loop
- state: DynaMOSAState, SearchResult and snapshot builders
- initialization: component and initial population setup
"""

from .dynamosa import DynaMOSA
from .state import DynaMOSAState, SearchResult, SearchStatus

__all__ = ["DynaMOSA", "DynaMOSAState", "SearchResult", "SearchStatus"]
