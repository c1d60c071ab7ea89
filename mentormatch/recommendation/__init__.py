"""
Public recommendation API surface.

External callers (CLI, services, tests) should import from here rather than
reaching into submodules directly:

    • RecommendationGenerator        main entry point
    • AdvisoryRanking                top-K advisory strategy
    • CapacityConstrainedAssignment  binding, capacity-checked strategy
    • build_strategy                 strategy lookup by configured name
    • rank_mentors                   scoring + ranking + reason annotation
"""

from .generator import RecommendationGenerator
from .ranking import match_reason, rank_mentors
from .strategies import (
    AdvisoryRanking,
    AssignmentStrategy,
    CapacityConstrainedAssignment,
    build_strategy,
)

__all__ = [
    "RecommendationGenerator",
    "AdvisoryRanking",
    "AssignmentStrategy",
    "CapacityConstrainedAssignment",
    "build_strategy",
    "match_reason",
    "rank_mentors",
]
