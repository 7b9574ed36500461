from datetime import datetime, timezone

import pytest

from journeys.errors import EmptyItineraryError, MalformedItineraryError, MissingDistanceError
from journeys.models import Itinerary, Leg, LegMode, Place

from .factories import T0, otp_itinerary, otp_leg


def test_leg_from_otp_builds_strict_leg():
    raw = otp_leg(0, 50, 39000, origin="Abergavenny", destination="Hereford", route="TFW")
    raw["trip"] = {"gtfsId": "1:C12345"}

    leg = Leg.from_otp(raw)

    assert leg.mode == LegMode.RAIL
    assert leg.origin == Place("Abergavenny", "1:ABE")
    assert leg.destination.name == "Hereford"
    assert leg.distance_m == 39000.0
    assert leg.trip_id == "1:C12345"
    assert leg.route_id == "TFW"
    assert leg.duration_minutes == 50
    assert leg.start_time == datetime(2021, 12, 20, 11, 33, 20, tzinfo=timezone.utc)


def test_leg_without_distance_fails_fast():
    raw = otp_leg(0, 10, distance_m=None)

    with pytest.raises(MissingDistanceError) as excinfo:
        Leg.from_otp(raw, index=2)

    assert excinfo.value.leg_index == 2


def test_zero_distance_is_not_missing():
    assert Leg.from_otp(otp_leg(0, 5, distance_m=0)).distance_m == 0.0


def test_unknown_mode_maps_to_other():
    raw = otp_leg(0, 10)
    raw["mode"] = "FUNICULAR"
    assert Leg.from_otp(raw).mode == LegMode.OTHER
    assert LegMode.parse("walk") == LegMode.WALK
    assert LegMode.parse(None) == LegMode.OTHER


def test_place_without_stop():
    assert Place.from_otp({"name": "Somewhere"}) == Place("Somewhere", None)
    assert Place.from_otp(None).name == "Unknown"


def test_itinerary_from_otp():
    raw = otp_itinerary(otp_leg(0, 50, 39000), otp_leg(60, 126, 77700))
    raw["duration"] = 126 * 60
    raw["generalizedCost"] = 9001

    itinerary = Itinerary.from_otp(raw)

    assert len(itinerary.legs) == 2
    assert isinstance(itinerary.legs, tuple)
    assert itinerary.start_time_ms == T0
    assert itinerary.derived_duration_minutes == 126
    assert itinerary.duration_seconds == 7560.0
    assert itinerary.generalized_cost == 9001.0
    assert itinerary.transfer_count == 1


def test_disagreeing_planner_duration_is_kept_but_not_trusted():
    raw = otp_itinerary(otp_leg(0, 30))
    raw["duration"] = 9999

    itinerary = Itinerary.from_otp(raw)

    assert itinerary.duration_seconds == 9999.0
    assert itinerary.derived_duration_minutes == 30


def test_itinerary_without_legs_is_rejected():
    with pytest.raises(EmptyItineraryError):
        Itinerary.from_otp({"startTime": T0, "endTime": T0, "legs": []})

    with pytest.raises(EmptyItineraryError):
        Itinerary.new([])


def test_itinerary_list_legs_are_frozen_to_tuple():
    leg = Leg.from_otp(otp_leg(0, 10))
    itinerary = Itinerary(legs=[leg], start_time_ms=leg.start_time_ms, end_time_ms=leg.end_time_ms)
    assert itinerary.legs == (leg,)


@pytest.mark.parametrize("field", ["startTime", "endTime"])
def test_leg_from_otp_missing_timestamp(field):
    raw = otp_leg(0, 30)
    del raw[field]

    with pytest.raises(MalformedItineraryError) as excinfo:
        Leg.from_otp(raw, index=1)

    assert excinfo.value.leg_index == 1
    assert field in str(excinfo.value)


@pytest.mark.parametrize("distance", ["n/a", [], {"m": 10}])
def test_leg_from_otp_unparseable_distance(distance):
    with pytest.raises(MalformedItineraryError):
        Leg.from_otp(otp_leg(0, 30, distance))


def test_itinerary_from_otp_rejects_bad_shapes():
    with pytest.raises(MalformedItineraryError):
        Itinerary.from_otp(None)

    with pytest.raises(MalformedItineraryError):
        Itinerary.from_otp({"legs": 5})

    with pytest.raises(MalformedItineraryError):
        Itinerary.from_otp({**otp_itinerary(otp_leg(0, 30)), "duration": "soon"})
