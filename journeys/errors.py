"""
Purpose: Error kinds raised while turning an itinerary into a corridor score.

All of these are local to a single itinerary. The batch engine catches
RouteScoringError per item and records it as a failure, so one malformed
itinerary never aborts the rest of the batch.
"""

from __future__ import annotations

from typing import Optional


class RouteScoringError(Exception):
    """Base class for per-itinerary scoring failures."""

    kind = "scoring_error"


class InvalidCoordinateError(RouteScoringError, ValueError):
    """Latitude/longitude outside [-90, 90] / [-180, 180] (or not a number)."""

    kind = "invalid_coordinate"


class MissingDistanceError(RouteScoringError):
    """A leg has no distance value, so the detour ratio cannot be computed."""

    kind = "missing_distance"

    def __init__(self, message: str, leg_index: Optional[int] = None):
        super().__init__(message)
        self.leg_index = leg_index


class EmptyItineraryError(RouteScoringError):
    kind = "empty_itinerary"


class InvalidItineraryOrderingError(RouteScoringError):
    """A leg ends before it starts, or (strict mode) legs overlap in time."""

    kind = "invalid_ordering"

    def __init__(self, message: str, leg_index: Optional[int] = None):
        super().__init__(message)
        self.leg_index = leg_index


class MalformedItineraryError(RouteScoringError):
    """A planner itinerary or leg is missing a required field or has an unparseable value."""

    kind = "malformed_itinerary"

    def __init__(self, message: str, leg_index: Optional[int] = None):
        super().__init__(message)
        self.leg_index = leg_index
