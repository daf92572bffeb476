"""
covevo: dynamic many-objective search for goal coverage.

Candidates are scored against many goals at once; goals become targets only
once the goals they depend on are covered, and every covered goal keeps its
best covering candidate in an archive.
"""

from covevo.api import run_search
from covevo.engine.algorithm.components import CoverageArchive, Fronts, GoalManager, TournamentBreeder
from covevo.engine.algorithm.config import DynaMOSAConfig, DynaMOSAConfigData
from covevo.engine.algorithm.dynamosa import DynaMOSA, SearchResult
from covevo.foundation.candidate import Candidate
from covevo.foundation.exceptions import CovevoError
from covevo.foundation.goals import Goal

__version__ = "0.1.0"

__all__ = [
    "run_search",
    "DynaMOSA",
    "DynaMOSAConfig",
    "DynaMOSAConfigData",
    "SearchResult",
    "Goal",
    "Candidate",
    "GoalManager",
    "CoverageArchive",
    "Fronts",
    "TournamentBreeder",
    "CovevoError",
    "__version__",
]
