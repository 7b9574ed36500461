"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Accepts a travel request (origin CRS, destination CRS, date, time), asks the
trip planner for candidate itineraries, scores them per corridor, keeps the best
route of each corridor and renders the top few as route summaries for the
ranking consumer.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from journeys.scoring import (
    BatchScoreResult,
    ScoredRoute,
    ScoringFailure,
    ScoringPolicy,
    best_per_corridor,
    score_batch,
)

logger = logging.getLogger(__name__)

_CRS_PATTERN = re.compile(r"^[A-Z0-9]{3}$")


@dataclass(frozen=True)
class JourneyRequest:
    """
    One matching request: CRS codes plus a departure date (YYYY-MM-DD) and time (HH:mm).
    """
    origin_crs: str
    destination_crs: str
    date: str
    time: str

    def validate(self) -> None:
        for label, value in (("origin_crs", self.origin_crs), ("destination_crs", self.destination_crs)):
            if not value or not _CRS_PATTERN.match(value.strip().upper()):
                raise ValueError(f"{label} must be a 3 character CRS code, got {value!r}")

        try:
            datetime.strptime(self.date, "%Y-%m-%d")
        except ValueError as e:
            raise ValueError(f"date must be YYYY-MM-DD, got {self.date!r}") from e

        try:
            datetime.strptime(self.time, "%H:%M")
        except ValueError as e:
            raise ValueError(f"time must be HH:mm, got {self.time!r}") from e

    def normalized(self) -> JourneyRequest:
        """Same request with CRS codes trimmed and uppercased ("kgx" -> "KGX")."""
        return replace(
            self,
            origin_crs=self.origin_crs.strip().upper(),
            destination_crs=self.destination_crs.strip().upper(),
        )


@dataclass(frozen=True)
class LegSummary:
    origin: str
    destination: str
    departure: str
    arrival: str
    operator: str


@dataclass(frozen=True)
class RouteSummary:
    legs: List[LegSummary]
    total_duration: str
    is_direct: bool
    interchange_station: Optional[str]
    score: float
    corridor_id: str


@dataclass(frozen=True)
class MatchResult:
    routes: List[RouteSummary]
    ranked: List[ScoredRoute]
    failures: List[ScoringFailure] = field(default_factory=list)
    straight_line_distance_km: float = 0.0


# -------------------------
# Formatting helpers
# -------------------------

def format_time(timestamp_ms: int) -> str:
    """Unix ms -> "HH:MM" (UTC)."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.strftime("%H:%M")


def format_duration(duration_ms: int) -> str:
    """Milliseconds -> "4h 30m" / "45m" / "2h"."""
    total_minutes = int(duration_ms // 60000)
    hours, minutes = divmod(total_minutes, 60)

    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def extract_operator(route_id: Optional[str]) -> str:
    """
    Operator code from a route id, e.g. "1:GW-EXPRESS" -> "GW".
    Route id formats vary by GTFS source; this keeps the first dash segment.
    """
    if not route_id:
        return "Unknown"
    code = route_id.split(":")[-1]
    return code.split("-")[0] or "Unknown"


def summarize_route(route: ScoredRoute) -> RouteSummary:
    itinerary = route.itinerary
    legs = [
        LegSummary(
            origin=leg.origin.name,
            destination=leg.destination.name,
            departure=format_time(leg.start_time_ms),
            arrival=format_time(leg.end_time_ms),
            operator=extract_operator(leg.route_id),
        )
        for leg in itinerary.legs
    ]

    is_direct = len(legs) == 1
    return RouteSummary(
        legs=legs,
        total_duration=format_duration(itinerary.end_time_ms - itinerary.start_time_ms),
        is_direct=is_direct,
        interchange_station=None if is_direct else legs[0].destination,
        score=round(route.corridor_score.score, 1),
        corridor_id=route.corridor_score.corridor_id,
    )


# -------------------------
# Pipeline
# -------------------------

def match_journey(
    request: JourneyRequest,
    client,
    *,
    policy: Optional[ScoringPolicy] = None,
    limit: int = 3,
    correlation_id: Optional[str] = None,
) -> MatchResult:
    """
    Plan -> score -> best per corridor -> top `limit` summaries.

    client is anything with plan_journey(from_crs, to_crs, date, time, correlation_id)
    returning a PlanResult (routing.OTPClient in production).
    Planner errors (OTPError, NoRoutesFoundError) propagate to the caller.
    """
    request.validate()
    request = request.normalized()

    plan = client.plan_journey(
        request.origin_crs,
        request.destination_crs,
        request.date,
        request.time,
        correlation_id=correlation_id,
    )

    result: BatchScoreResult = score_batch(
        plan.itineraries,
        plan.from_coords,
        plan.to_coords,
        policy=policy,
    )

    if result.failures:
        logger.warning("%s (correlation_id=%s)", result.summary(), correlation_id)

    best = best_per_corridor(result.ranked)[:limit]
    straight_km = best[0].corridor_score.straight_line_distance_km if best else 0.0

    logger.info(
        "Matched %s -> %s: %d corridors returned (correlation_id=%s)",
        request.origin_crs,
        request.destination_crs,
        len(best),
        correlation_id,
    )

    return MatchResult(
        routes=[summarize_route(r) for r in best],
        ranked=best,
        failures=result.failures,
        straight_line_distance_km=straight_km,
    )
