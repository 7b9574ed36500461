"""
Purpose: Reduce an itinerary's ordered legs into the aggregates the scorer needs.
What it does:

route_distance_km = Σ leg.distance_m / 1000

transfer_count = len(legs) - 1 (floor 0)

duration_minutes = (last.end - first.start) / 60000, always from the leg
timestamps so the duration matches the legs actually scored.

Rule: Aggregation does not weight anything; weights live in the policy.
"""

# journeys/scoring/aggregation.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..errors import EmptyItineraryError, InvalidItineraryOrderingError, MissingDistanceError
from ..models import Leg


@dataclass(frozen=True)
class LegAggregate:
    route_distance_km: float
    transfer_count: int
    duration_minutes: float


def aggregate_legs(legs: Sequence[Leg], *, merge_same_trip: bool = False) -> LegAggregate:
    """
    Aggregate route distance, transfer count and duration for a leg sequence.

    merge_same_trip:
        If True, a junction between two legs with the same trip_id is the
        same physical vehicle and does not count as a transfer.
    """
    if not legs:
        raise EmptyItineraryError("Cannot aggregate an itinerary with no legs")

    total_m = 0.0
    for i, leg in enumerate(legs):
        if leg.distance_m is None:
            raise MissingDistanceError(f"Leg {i} has no distance value", leg_index=i)
        total_m += float(leg.distance_m)

    transfers = 0
    for prev, nxt in zip(legs[:-1], legs[1:]):
        if merge_same_trip and prev.trip_id and prev.trip_id == nxt.trip_id:
            continue
        transfers += 1

    duration = (legs[-1].end_time_ms - legs[0].start_time_ms) / 60000

    return LegAggregate(
        route_distance_km=total_m / 1000,
        transfer_count=transfers,
        duration_minutes=duration,
    )


def check_leg_times(legs: Sequence[Leg]) -> None:
    """Each leg ends no earlier than it starts. A reversed leg has no meaningful duration."""
    for i, leg in enumerate(legs):
        if leg.end_time_ms < leg.start_time_ms:
            raise InvalidItineraryOrderingError(f"Leg {i} ends before it starts", leg_index=i)


def check_leg_ordering(legs: Sequence[Leg]) -> None:
    """
    Chronological / contiguity check:
      each leg ends no earlier than it starts, and
      end of leg n <= start of leg n+1.
    """
    check_leg_times(legs)

    for i, (prev, nxt) in enumerate(zip(legs[:-1], legs[1:])):
        if prev.end_time_ms > nxt.start_time_ms:
            raise InvalidItineraryOrderingError(
                f"Leg {i} ends after leg {i + 1} starts", leg_index=i + 1
            )
