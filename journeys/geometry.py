"""
Purpose: Straight-line (great-circle) distance between two coordinates.

Used as the baseline for the detour ratio:
  detour_ratio = route_distance_km / straight_line_distance_km

Rule: pure math only. No planner calls, no scoring.
"""

from __future__ import annotations

import math
from typing import Tuple

from .errors import InvalidCoordinateError

# internal coordinate type: (lat, lon)
Coordinates = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def validate_coordinates(coordinates: Coordinates) -> Coordinates:
    """
    Return (lat, lon) as floats, or raise InvalidCoordinateError.
    """
    try:
        lat, lon = coordinates
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError) as e:
        raise InvalidCoordinateError(f"Malformed coordinates: {coordinates!r}") from e

    # NaN fails both comparisons, so it is rejected here too
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"Latitude out of range [-90, 90]: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(f"Longitude out of range [-180, 180]: {lon}")

    return lat, lon


def straight_line_distance_km(a: Coordinates, b: Coordinates) -> float:
    """
    Haversine distance in kilometres between two (lat, lon) points.

    Formula:
      h = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
      d = 2R · asin(√h)
    """
    lat1, lon1 = validate_coordinates(a)
    lat2, lon2 = validate_coordinates(b)

    if (lat1, lon1) == (lat2, lon2):
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    # rounding can push h a hair above 1.0 for antipodal points
    h = min(1.0, h)

    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))
