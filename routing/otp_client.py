#Purpose: The OTP (OpenTripPlanner) "adapter/client".
#Sole responsibility: talk to the OTP GraphQL endpoint via HTTP and return normalized outputs.
#Encapsulates OTP-specific details:
#CRS code -> gtfsId formatting ("1:KGX")
#GraphQL query documents (stop lookup, journey plan)
#timeouts/error handling (no retries)
#parsing response JSON into your internal shape
#It should not contain scoring or ranking.


import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from journeys.geometry import Coordinates

# Read OTP endpoint from environment
# Example in .env:
# OTP_ROUTER_URL=http://otp-router:8080/otp/gtfs/v1
load_dotenv()
OTP_ROUTER_URL = os.getenv("OTP_ROUTER_URL")

# feed id prefix of the national rail GTFS feed
DEFAULT_FEED_ID = "1"

logger = logging.getLogger(__name__)

RESOLVE_STOP_QUERY = """
  query ResolveStop($id: String!) {
    stop(id: $id) {
      gtfsId
      name
      lat
      lon
    }
  }
"""

PLAN_JOURNEY_QUERY = """
  query PlanJourney(
    $fromLat: Float!, $fromLon: Float!,
    $toLat: Float!, $toLon: Float!,
    $date: String!, $time: String!
  ) {
    plan(
      from: {lat: $fromLat, lon: $fromLon}
      to: {lat: $toLat, lon: $toLon}
      date: $date
      time: $time
      transportModes: [{mode: RAIL}]
      numItineraries: 8
    ) {
      itineraries {
        startTime
        endTime
        duration
        generalizedCost
        legs {
          mode
          from { name stop { gtfsId } }
          to { name stop { gtfsId } }
          startTime
          endTime
          distance
          trip { gtfsId }
          route { gtfsId }
        }
      }
    }
  }
"""


class OTPError(Exception):
    """Custom exception for OTP client errors."""
    pass


class OTPTimeoutError(OTPError):
    pass


class NoRoutesFoundError(OTPError):
    pass


@dataclass(frozen=True)
class PlanResult:
    """
    Raw itineraries plus the resolved endpoint coordinates
    (the scorer needs them for the straight-line baseline).
    """
    itineraries: List[Dict[str, Any]]
    from_coords: Coordinates
    to_coords: Coordinates


def extract_crs(stop_id: str) -> str:
    """
    OTP stop id "1:KGX" -> CRS "KGX".
    """
    parts = stop_id.split(":")
    if len(parts) != 2 or not parts[1]:
        raise ValueError(f"Invalid OTP stopId format: {stop_id}")
    return parts[1]


class OTPClient:
    """
    OTP Adapter / Client

    Sole responsibility:
    - Talk to OTP via HTTP (GraphQL POST)
    - Convert CRS codes -> gtfsIds -> (lat, lon)
    - Return normalized outputs

    """
    def __init__(self, base_url: Optional[str] = None, timeout: int = 5,
                 feed_id: str = DEFAULT_FEED_ID, session: Optional[requests.Session] = None):
        self.base_url = base_url or OTP_ROUTER_URL
        self.timeout = timeout #seconds to wait for OTP before giving up
        self.feed_id = feed_id
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("OTP router URL not set. Please set OTP_ROUTER_URL in the .env file.")

    #----------------
    # Internal helper
    #----------------
    def _post(self, query: str, variables: Dict[str, Any],
              correlation_id: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id

        try:
            response = self.session.post(
                self.base_url,
                json={"query": query, "variables": variables},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise OTPTimeoutError(f"OTP service timeout: {e}") from e
        except requests.RequestException as e:
            raise OTPError(f"OTP service unavailable: {e}") from e

        if response.status_code >= 500:
            raise OTPError(f"OTP service returned {response.status_code} error")
        response.raise_for_status()

        return response.json()

    #----------------
    # Public methods
    #----------------
    def resolve_stop_coordinates(self, crs_code: str,
                                 correlation_id: Optional[str] = None) -> Coordinates:
        """
        Resolve a CRS code (e.g. "KGX") to (lat, lon) using stop(id: "1:KGX").
        OTP's plan query needs coordinates, not station names.
        """
        gtfs_id = f"{self.feed_id}:{crs_code}"
        data = self._post(RESOLVE_STOP_QUERY, {"id": gtfs_id}, correlation_id)

        errors = data.get("errors") or []
        if errors:
            raise OTPError(
                f'OTP GraphQL error resolving station "{crs_code}": {errors[0].get("message")}'
            )

        stop = (data.get("data") or {}).get("stop")
        if not stop:
            raise OTPError(f"Station not found: {crs_code}")

        return float(stop["lat"]), float(stop["lon"])

    def plan_journey(self, from_crs: str, to_crs: str, date: str, time: str,
                     correlation_id: Optional[str] = None) -> PlanResult:
        """
        Plan a journey: resolve both stations, then run the plan query.

        Args:
            from_crs / to_crs: CRS codes (e.g. "AGV", "BHM")
            date: YYYY-MM-DD
            time: HH:mm
            correlation_id: forwarded as X-Correlation-ID for tracing

        Returns:
            PlanResult with raw itinerary dicts and endpoint coordinates.
        """
        from_coords = self.resolve_stop_coordinates(from_crs, correlation_id)
        to_coords = self.resolve_stop_coordinates(to_crs, correlation_id)

        logger.info(
            "Planning journey %s -> %s on %s %s (correlation_id=%s)",
            from_crs, to_crs, date, time, correlation_id,
        )

        data = self._post(
            PLAN_JOURNEY_QUERY,
            {
                "fromLat": from_coords[0],
                "fromLon": from_coords[1],
                "toLat": to_coords[0],
                "toLon": to_coords[1],
                "date": date,
                "time": time,
            },
            correlation_id,
        )

        plan = (data.get("data") or {}).get("plan")
        if not plan:
            errors = data.get("errors") or [{}]
            raise OTPError(f"OTP GraphQL error: {errors[0].get('message', 'Invalid response from OTP')}")

        itineraries = plan.get("itineraries") or []
        if not itineraries:
            raise NoRoutesFoundError("No routes found for specified date/time")

        return PlanResult(itineraries=itineraries, from_coords=from_coords, to_coords=to_coords)
