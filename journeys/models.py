"""
Purpose: Domain models for the Journeys capability.
What it does:
- Defines core data structures:
- Place (name, optional stop id "<feedId>:<CRS-or-code>")
- Leg (mode, from/to place, start/end timestamps, distance, trip/route ids)
- Itinerary (ordered legs + overall start/end timestamps)

Defines enums/constants:
- LegMode = RAIL | BUS | TRAM | SUBWAY | FERRY | WALK | ... | OTHER

Validated construction:
- Leg.from_otp / Itinerary.from_otp turn the loose planner JSON shape into
  strict values and fail fast on a missing distance, an empty leg list or a
  missing / unparseable field (MalformedItineraryError).

Rule: No planner calls, no scoring logic. Models only.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import EmptyItineraryError, MalformedItineraryError, MissingDistanceError

logger = logging.getLogger(__name__)

# planner-reported duration may disagree with the timestamps by rounding only
DURATION_TOLERANCE_SECONDS = 1.0


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Unix milliseconds -> timezone-aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


class LegMode(Enum):
    RAIL = "RAIL"
    BUS = "BUS"
    COACH = "COACH"
    TRAM = "TRAM"
    SUBWAY = "SUBWAY"
    FERRY = "FERRY"
    WALK = "WALK"
    BICYCLE = "BICYCLE"
    CAR = "CAR"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Optional[str]) -> LegMode:
        if not value:
            return cls.OTHER
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Place:
    """
    Origin or destination of a leg.
    """
    name: str
    stop_id: Optional[str] = None

    @staticmethod
    def from_otp(data: Optional[Dict[str, Any]]) -> Place:
        data = data or {}
        stop = data.get("stop") or {}
        return Place(name=data.get("name") or "Unknown", stop_id=stop.get("gtfsId"))


@dataclass(frozen=True)
class Leg:
    """
    One continuous transport segment (e.g. one train ride).

    distance_m is Optional at the type level because the planner may omit it,
    but scoring treats it as required (MissingDistanceError).
    """
    mode: LegMode
    origin: Place
    destination: Place
    start_time_ms: int
    end_time_ms: int
    distance_m: Optional[float] = None
    trip_id: Optional[str] = None
    route_id: Optional[str] = None

    @property
    def start_time(self) -> datetime:
        return ms_to_datetime(self.start_time_ms)

    @property
    def end_time(self) -> datetime:
        return ms_to_datetime(self.end_time_ms)

    @property
    def duration_minutes(self) -> float:
        return (self.end_time_ms - self.start_time_ms) / 60000

    @staticmethod
    def from_otp(data: Dict[str, Any], *, index: Optional[int] = None) -> Leg:
        """
        Build a strict Leg from an OTP leg dict:
          {mode, from, to, startTime, endTime, distance, trip?, route?}
        """
        where = f" (leg {index})" if index is not None else ""
        if not isinstance(data, dict):
            raise MalformedItineraryError(f"Leg{where} is not an object", leg_index=index)

        distance = data.get("distance")
        if distance is None:
            raise MissingDistanceError(f"Leg{where} has no distance value", leg_index=index)

        try:
            trip = data.get("trip") or {}
            route = data.get("route") or {}

            return Leg(
                mode=LegMode.parse(data.get("mode")),
                origin=Place.from_otp(data.get("from")),
                destination=Place.from_otp(data.get("to")),
                start_time_ms=int(data["startTime"]),
                end_time_ms=int(data["endTime"]),
                distance_m=float(distance),
                trip_id=trip.get("gtfsId"),
                route_id=route.get("gtfsId"),
            )
        except KeyError as e:
            raise MalformedItineraryError(f"Leg{where} is missing {e}", leg_index=index) from e
        except (AttributeError, TypeError, ValueError) as e:
            raise MalformedItineraryError(f"Leg{where} has an invalid value: {e}", leg_index=index) from e


@dataclass(frozen=True)
class Itinerary:
    """
    An ordered, non-empty sequence of legs from origin to destination.

    duration_seconds and generalized_cost are carried as reported by the
    planner; the duration derived from timestamps is authoritative.
    """
    legs: Tuple[Leg, ...]
    start_time_ms: int
    end_time_ms: int
    duration_seconds: Optional[float] = None
    generalized_cost: Optional[float] = None

    def __post_init__(self):
        # accept any sequence but store a tuple so the value stays immutable
        if not isinstance(self.legs, tuple):
            object.__setattr__(self, "legs", tuple(self.legs))

    @property
    def start_time(self) -> datetime:
        return ms_to_datetime(self.start_time_ms)

    @property
    def end_time(self) -> datetime:
        return ms_to_datetime(self.end_time_ms)

    @property
    def derived_duration_minutes(self) -> float:
        return (self.end_time_ms - self.start_time_ms) / 60000

    @property
    def transfer_count(self) -> int:
        return max(0, len(self.legs) - 1)

    @staticmethod
    def new(legs, duration_seconds: Optional[float] = None) -> Itinerary:
        """
        Factory: build an itinerary whose start/end come from its legs.
        """
        legs = tuple(legs)
        if not legs:
            raise EmptyItineraryError("Itinerary has no legs")
        return Itinerary(
            legs=legs,
            start_time_ms=legs[0].start_time_ms,
            end_time_ms=legs[-1].end_time_ms,
            duration_seconds=duration_seconds,
        )

    @staticmethod
    def from_otp(data: Dict[str, Any]) -> Itinerary:
        """
        Build a strict Itinerary from an OTP itinerary dict:
          {startTime, endTime, legs: [...], duration?, generalizedCost?}
        """
        if not isinstance(data, dict):
            raise MalformedItineraryError("Itinerary is not an object")

        raw_legs = data.get("legs") or []
        if not isinstance(raw_legs, (list, tuple)):
            raise MalformedItineraryError("Itinerary legs is not a list")
        if not raw_legs:
            raise EmptyItineraryError("Itinerary has no legs")

        legs = tuple(Leg.from_otp(leg, index=i) for i, leg in enumerate(raw_legs))

        try:
            start_ms = int(data.get("startTime", legs[0].start_time_ms))
            end_ms = int(data.get("endTime", legs[-1].end_time_ms))
            duration = data.get("duration")
            duration = float(duration) if duration is not None else None
            cost = data.get("generalizedCost")
            cost = float(cost) if cost is not None else None
        except (TypeError, ValueError) as e:
            raise MalformedItineraryError(f"Itinerary has an invalid value: {e}") from e

        if duration is not None:
            derived_seconds = (end_ms - start_ms) / 1000
            if abs(duration - derived_seconds) > DURATION_TOLERANCE_SECONDS:
                logger.debug(
                    "Planner duration %ss disagrees with timestamps (%ss); using timestamps",
                    duration,
                    derived_seconds,
                )

        return Itinerary(
            legs=legs,
            start_time_ms=start_ms,
            end_time_ms=end_ms,
            duration_seconds=duration,
            generalized_cost=cost,
        )
