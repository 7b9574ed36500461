import pytest

from journeys.errors import InvalidCoordinateError
from journeys.geometry import straight_line_distance_km, validate_coordinates


def test_abergavenny_to_birmingham_distance():
    """
    AGV -> BHM is roughly 105 km as the crow flies.
    """
    distance = straight_line_distance_km((51.8241, -3.0175), (52.4778, -1.8996))
    assert 104.0 < distance < 107.0


def test_short_and_long_routes():
    # Cardiff -> Newport
    assert 16.5 < straight_line_distance_km((51.4816, -3.1791), (51.5882, -2.9977)) < 18.0
    # Manchester -> Bristol
    assert 226.0 < straight_line_distance_km((53.4808, -2.2426), (51.4493, -2.5831)) < 228.0


@pytest.mark.parametrize(
    "a, b",
    [
        ((51.8241, -3.0175), (52.4778, -1.8996)),
        ((-33.8688, 151.2093), (40.7128, -74.0060)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert straight_line_distance_km(a, b) == pytest.approx(straight_line_distance_km(b, a))


def test_identical_points_are_zero_apart():
    assert straight_line_distance_km((52.4778, -1.8996), (52.4778, -1.8996)) == 0.0


def test_antipodal_points_do_not_overflow():
    # half the circumference, ~20015 km
    assert straight_line_distance_km((0.0, 0.0), (0.0, 180.0)) == pytest.approx(20015.1, abs=0.5)


@pytest.mark.parametrize(
    "bad",
    [(90.1, 0.0), (-91.0, 0.0), (0.0, 180.5), (0.0, -181.0), (float("nan"), 0.0), ("north", 1.0), (1.0,)],
)
def test_invalid_coordinates_are_rejected(bad):
    with pytest.raises(InvalidCoordinateError):
        straight_line_distance_km(bad, (0.0, 0.0))


def test_invalid_coordinate_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_coordinates((100.0, 0.0))


def test_boundary_values_are_valid():
    assert validate_coordinates((90, -180)) == (90.0, -180.0)
