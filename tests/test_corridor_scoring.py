import pytest

from journeys.errors import InvalidCoordinateError, InvalidItineraryOrderingError, MissingDistanceError
from journeys.models import Itinerary
from journeys.scoring.policy import ScoringPolicy, default_policy, research_policy
from journeys.scoring.scorer import (
    calculate_detour_penalty,
    calculate_detour_ratio,
    detect_corridor_key,
    score_itinerary,
)

from .factories import build_leg, point_north_of


def test_scenario_a_direct_single_leg(origin, destination_10km):
    """
    Single leg, route distance == straight-line distance == 10 km,
    30 minutes, no transfers -> score is just the duration.
    """
    itinerary = Itinerary.new([build_leg(0, 30, 10000.0)])

    score = score_itinerary(itinerary, origin, destination_10km, "KGX-NORTH")

    assert score.corridor_id == "KGX-NORTH"
    assert score.detour_penalty == pytest.approx(0.0, abs=1e-6)
    assert score.transfer_penalty == 0
    assert score.transfer_count == 0
    assert score.duration_minutes == pytest.approx(30.0)
    assert score.score == pytest.approx(30.0, abs=1e-6)
    assert score.straight_line_distance_km == pytest.approx(10.0, rel=1e-9)


def test_scenario_b_detour_and_transfer(origin, destination_10km):
    """
    Two legs, 15 km route vs 10 km straight line (ratio 1.5), 40 minutes,
    one transfer: detour (1.5-1)*40*0.5 = 10, transfer 10, total 60.
    """
    itinerary = Itinerary.new([build_leg(0, 18, 7000.0), build_leg(22, 40, 8000.0)])
    policy = ScoringPolicy(detour_weight=0.5, per_transfer_penalty_minutes=10)

    score = score_itinerary(itinerary, origin, destination_10km, "KGX-NORTH", policy)

    assert score.detour_ratio == pytest.approx(1.5)
    assert score.route_distance_km == pytest.approx(15.0)
    assert score.detour_penalty == pytest.approx(10.0)
    assert score.transfer_count == 1
    assert score.transfer_penalty == pytest.approx(10.0)
    assert score.score == pytest.approx(60.0)


def test_scenario_c_missing_distance_fails_scoring(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 18, 7000.0), build_leg(22, 40, None)])

    with pytest.raises(MissingDistanceError):
        score_itinerary(itinerary, origin, destination_10km, "KGX-NORTH")


def test_scenario_d_origin_equals_destination(origin):
    itinerary = Itinerary.new([build_leg(0, 25, 4000.0), build_leg(30, 50, 4000.0)])

    score = score_itinerary(itinerary, origin, origin, "LOOP")

    assert score.straight_line_distance_km == 0.0
    assert score.detour_ratio == 1.0
    assert score.detour_penalty == 0.0
    assert score.score == pytest.approx(50.0 + 10.0)


def test_route_shorter_than_straight_line_is_clamped(origin):
    destination = point_north_of(origin, 20.0)
    itinerary = Itinerary.new([build_leg(0, 30, 15000.0)])

    score = score_itinerary(itinerary, origin, destination, "SHORT")

    assert score.detour_ratio == 1.0
    assert score.detour_penalty == 0.0


def test_invalid_request_coordinates(direct_itinerary, origin):
    with pytest.raises(InvalidCoordinateError):
        score_itinerary(direct_itinerary, origin, (95.0, 0.0), "BAD")


def test_default_policy_is_used_when_omitted(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 20), build_leg(25, 40)])
    explicit = score_itinerary(itinerary, origin, destination_10km, "X", default_policy())
    implicit = score_itinerary(itinerary, origin, destination_10km, "X")
    assert explicit == implicit


def test_higher_transfer_weight_changes_only_transfer_term(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 20), build_leg(25, 40), build_leg(45, 60)])

    base = score_itinerary(itinerary, origin, destination_10km, "X", ScoringPolicy())
    heavy = score_itinerary(
        itinerary, origin, destination_10km, "X", ScoringPolicy(per_transfer_penalty_minutes=25)
    )

    assert heavy.transfer_penalty == 50
    assert heavy.score - base.score == pytest.approx(30)
    assert heavy.detour_penalty == base.detour_penalty


def test_research_policy_hereford_corridor():
    """
    AGV -> BHM via Hereford: 116.7 km route, ratio ~1.11 sits under the
    1.2 allowance, so only duration + one 15 minute interchange count.
    """
    itinerary = Itinerary.new([
        build_leg(0, 50, 39000, origin="Abergavenny", destination="Hereford", route_id="TFW"),
        build_leg(60, 126, 77700, origin="Hereford", destination="Birmingham New Street", route_id="WMT"),
    ])

    score = score_itinerary(itinerary, (51.8241, -3.0175), (52.4778, -1.8996), policy=research_policy())

    assert score.detour_penalty == 0
    assert score.transfer_penalty == 15
    assert score.score == pytest.approx(141.0)
    assert "Hereford" in score.corridor_id


def test_overlapping_legs_score_unless_strict(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 30), build_leg(20, 40)])

    lenient = score_itinerary(itinerary, origin, destination_10km, "X")
    assert lenient.duration_minutes == pytest.approx(40.0)

    with pytest.raises(InvalidItineraryOrderingError):
        score_itinerary(itinerary, origin, destination_10km, "X", ScoringPolicy(strict_ordering=True))


def test_detour_helpers():
    assert calculate_detour_ratio(116.7, 101.3) == pytest.approx(1.152, abs=1e-3)
    assert calculate_detour_ratio(5.0, 0.0) == 1.0

    policy = ScoringPolicy(detour_threshold=1.2, detour_weight=0.5)
    assert calculate_detour_penalty(1.15, 100, policy) == 0
    assert calculate_detour_penalty(1.7, 100, policy) == pytest.approx(25.0)


def test_corridor_key_for_interchange_route():
    itinerary = Itinerary.new([
        build_leg(0, 50, origin="Abergavenny", destination="Hereford", route_id="TFW-1"),
        build_leg(60, 126, origin="Hereford", destination="Birmingham New Street", route_id="WMT-2"),
    ])

    assert detect_corridor_key(itinerary) == "Hereford:TFW-1,WMT-2"


def test_corridor_key_for_direct_route_and_missing_route_id():
    direct = Itinerary.new([build_leg(0, 195, route_id="GW-EXPRESS")])
    unknown = Itinerary.new([build_leg(0, 30), build_leg(40, 60, route_id="XC")])

    assert detect_corridor_key(direct) == "Direct:GW-EXPRESS"
    assert detect_corridor_key(unknown) == "B:Unknown,XC"


def test_corridor_id_defaults_to_detected_key(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 30, route_id="GW")])
    assert score_itinerary(itinerary, origin, destination_10km).corridor_id == "Direct:GW"


def test_reversed_leg_is_rejected_in_lenient_mode(origin, destination_10km):
    itinerary = Itinerary.new([build_leg(0, 30), build_leg(50, 40)])

    with pytest.raises(InvalidItineraryOrderingError) as excinfo:
        score_itinerary(itinerary, origin, destination_10km, "X")

    assert excinfo.value.leg_index == 1
