"""
Purpose: Turn one itinerary into a comparable corridor score (minutes).
What it does:

Computes for each itinerary:

route_distance_km, transfer_count, duration (aggregation.py)

straight_line_km = haversine(origin, destination)

detour_ratio = route_distance_km / straight_line_km (1.0 when origin == destination)

detour_penalty = max(0, detour_ratio - threshold) × duration × detour_weight

transfer_penalty = transfer_count × per_transfer_penalty_minutes

score = duration + detour_penalty + transfer_penalty

Lower score = better.

Rule: Scoring computes a number; it does not rank or select.
"""

# journeys/scoring/scorer.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidItineraryOrderingError
from ..geometry import Coordinates, straight_line_distance_km
from ..models import Itinerary
from .aggregation import aggregate_legs, check_leg_ordering, check_leg_times
from .policy import ScoringPolicy, default_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorridorScore:
    """
    Score breakdown for one itinerary. All penalties are in minutes.
    """
    corridor_id: str
    score: float
    duration_minutes: float
    detour_penalty: float
    transfer_penalty: float
    detour_ratio: float
    route_distance_km: float
    transfer_count: int
    straight_line_distance_km: float = 0.0


@dataclass(frozen=True)
class ScoredRoute:
    """
    An itinerary paired with its score. index is the position in the batch input.
    """
    itinerary: Itinerary
    corridor_score: CorridorScore
    index: int = 0


def calculate_detour_ratio(route_distance_km: float, straight_line_distance_km: float) -> float:
    """
    route km / straight-line km, clamped to >= 1.0.

    Origin == destination (straight-line 0) is defined as 1.0 (no detour).
    A route reported shorter than the straight line is planner noise, also 1.0.
    """
    if straight_line_distance_km <= 0:
        return 1.0
    return max(1.0, route_distance_km / straight_line_distance_km)


def calculate_detour_penalty(
    detour_ratio: float,
    duration_minutes: float,
    policy: ScoringPolicy,
) -> float:
    excess = max(0.0, detour_ratio - policy.detour_threshold)
    return excess * duration_minutes * policy.detour_weight


def detect_corridor_key(itinerary: Itinerary) -> str:
    """
    Corridor identifier derived from the itinerary itself.

    Format: {interchange_stations}:{ordered_route_ids}
    Example: "Hereford:TFW-1,WMT-2" or "Direct:GW-EXPRESS"

    Route ids are included so two services through the same interchange
    station are still told apart.
    """
    legs = itinerary.legs
    route_ids = ",".join(leg.route_id or "Unknown" for leg in legs)

    if len(legs) <= 1:
        return f"Direct:{route_ids}"

    # destination of every leg but the last is an interchange
    interchanges = ",".join(leg.destination.name for leg in legs[:-1])
    return f"{interchanges}:{route_ids}"


def score_itinerary(
    itinerary: Itinerary,
    origin: Coordinates,
    destination: Coordinates,
    corridor_id: Optional[str] = None,
    policy: Optional[ScoringPolicy] = None,
) -> CorridorScore:
    """
    Score a single itinerary. No partial results: any aggregation or
    coordinate error propagates to the caller.

    corridor_id:
        Name of the origin-destination corridor being evaluated.
        If omitted, it is derived with detect_corridor_key().
    policy:
        Weights; default_policy() if omitted.
    """
    policy = policy or default_policy()

    # A leg that ends before it starts is always an error
    check_leg_times(itinerary.legs)

    # Overlapping legs only fail in strict mode
    try:
        check_leg_ordering(itinerary.legs)
    except InvalidItineraryOrderingError as e:
        if policy.strict_ordering:
            raise
        logger.warning("Scoring itinerary with out-of-order legs: %s", e)

    # 1) Aggregate legs
    agg = aggregate_legs(itinerary.legs, merge_same_trip=policy.merge_same_trip)

    # 2) Straight-line baseline
    straight_km = straight_line_distance_km(origin, destination)

    # 3) Detour ratio
    detour_ratio = calculate_detour_ratio(agg.route_distance_km, straight_km)

    # 4) Detour penalty
    detour_penalty = calculate_detour_penalty(detour_ratio, agg.duration_minutes, policy)

    # 5) Transfer penalty
    transfer_penalty = agg.transfer_count * policy.per_transfer_penalty_minutes

    # 6) Total
    score = agg.duration_minutes + detour_penalty + transfer_penalty

    corridor = corridor_id if corridor_id is not None else detect_corridor_key(itinerary)

    logger.debug(
        "corridor=%s duration=%.1f ratio=%.3f detour=%.1f transfers=%d score=%.1f",
        corridor,
        agg.duration_minutes,
        detour_ratio,
        detour_penalty,
        agg.transfer_count,
        score,
    )

    return CorridorScore(
        corridor_id=corridor,
        score=float(score),
        duration_minutes=float(agg.duration_minutes),
        detour_penalty=float(detour_penalty),
        transfer_penalty=float(transfer_penalty),
        detour_ratio=float(detour_ratio),
        route_distance_km=float(agg.route_distance_km),
        transfer_count=agg.transfer_count,
        straight_line_distance_km=float(straight_km),
    )
