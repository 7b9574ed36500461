import pytest

from journeys.models import Itinerary

from .factories import build_leg, point_north_of


@pytest.fixture
def origin():
    # London Kings Cross
    return (51.5308, -0.1238)


@pytest.fixture
def destination_10km(origin):
    return point_north_of(origin, 10.0)


@pytest.fixture
def direct_itinerary():
    return Itinerary.new([build_leg(0, 30, 10000.0, origin="Origin", destination="Terminus", route_id="1:GW-1")])
