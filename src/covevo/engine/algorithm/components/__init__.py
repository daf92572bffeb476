# algorithm/components/__init__.py
"""
Shared search components.

- archive: CoverageArchive, best covering candidate per goal
- goals_manager: GoalManager, the covered/current/uncovered partition
- ranking: non-dominated and preference sorting into Fronts
- diversity: subvector dominance and crowding diversity estimators
- selection: environmental selection and the reference tournament breeder
- termination: SearchBudget
"""

from covevo.engine.algorithm.components.archive import ARCHIVE_POLICIES, CoverageArchive
from covevo.engine.algorithm.components.diversity import (
    DIVERSITY_ESTIMATORS,
    CrowdingDistanceDiversity,
    DiversityEstimator,
    SubvectorDominanceDiversity,
    resolve_diversity,
)
from covevo.engine.algorithm.components.goals_manager import GoalManager
from covevo.engine.algorithm.components.ranking import (
    RANKINGS,
    Fronts,
    NonDominatedSorting,
    PreferenceSorting,
    RankingFunction,
    resolve_ranking,
)
from covevo.engine.algorithm.components.selection import (
    SelectionOutcome,
    TournamentBreeder,
    environmental_selection,
)
from covevo.engine.algorithm.components.termination import SearchBudget, parse_termination

__all__ = [
    # archive
    "ARCHIVE_POLICIES",
    "CoverageArchive",
    # goals
    "GoalManager",
    # ranking
    "RANKINGS",
    "Fronts",
    "RankingFunction",
    "NonDominatedSorting",
    "PreferenceSorting",
    "resolve_ranking",
    # diversity
    "DIVERSITY_ESTIMATORS",
    "DiversityEstimator",
    "SubvectorDominanceDiversity",
    "CrowdingDistanceDiversity",
    "resolve_diversity",
    # selection
    "SelectionOutcome",
    "environmental_selection",
    "TournamentBreeder",
    # termination
    "SearchBudget",
    "parse_termination",
]
