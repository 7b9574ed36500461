"""
Journeys domain package.

Public API:
- Domain models: Place, Leg, LegMode, Itinerary
- Geometry: Coordinates, straight_line_distance_km
- Errors: RouteScoringError and its kinds
- Scoring: see journeys.scoring
"""
from .errors import (
    EmptyItineraryError,
    InvalidCoordinateError,
    InvalidItineraryOrderingError,
    MalformedItineraryError,
    MissingDistanceError,
    RouteScoringError,
)
from .geometry import Coordinates, straight_line_distance_km
from .models import Itinerary, Leg, LegMode, Place

__all__ = ["Place",
           "Leg",
             "LegMode",
               "Itinerary",
               "Coordinates",
               "straight_line_distance_km",
               "RouteScoringError",
               "InvalidCoordinateError",
               "MissingDistanceError",
               "MalformedItineraryError",
               "EmptyItineraryError",
               "InvalidItineraryOrderingError",
               ]
