"""
Scoring subpackage for the Journeys domain.

Public API:
- score_batch
- BatchScoreResult
- score_itinerary / CorridorScore / ScoredRoute
- rank_routes / best_per_corridor
- ScoringPolicy
"""

from .aggregation import LegAggregate, aggregate_legs, check_leg_ordering, check_leg_times
from .engine import BatchScoreResult, ScoringFailure, ScoringOutcome, score_batch
from .policy import ScoringPolicy, default_policy, policy_from_env, research_policy
from .ranking import best_per_corridor, group_by_corridor, rank_routes
from .scorer import CorridorScore, ScoredRoute, detect_corridor_key, score_itinerary

__all__ = [
    "LegAggregate",
    "aggregate_legs",
    "check_leg_ordering",
    "check_leg_times",
    "BatchScoreResult",
    "ScoringFailure",
    "ScoringOutcome",
    "score_batch",
    "ScoringPolicy",
    "default_policy",
    "policy_from_env",
    "research_policy",
    "best_per_corridor",
    "group_by_corridor",
    "rank_routes",
    "CorridorScore",
    "ScoredRoute",
    "detect_corridor_key",
    "score_itinerary",
]
