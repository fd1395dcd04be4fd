import pytest

from fleettrack.geo.geodesy import (
    average_speed_kmh,
    bearing_degrees,
    degrees_to_cardinal,
    distance_km,
    format_coordinates,
    haversine_km,
    midpoint,
    normalize_heading,
    within_radius,
)
from fleettrack.models import Coordinate

PAIRS = [
    (Coordinate(0.0, 0.0), Coordinate(0.0, 0.008993)),
    (Coordinate(48.8566, 2.3522), Coordinate(51.5074, -0.1278)),
    (Coordinate(-23.5505, -46.6333), Coordinate(-22.9068, -43.1729)),
    (Coordinate(89.9, 179.9), Coordinate(-89.9, -179.9)),
]


def test_one_kilometer_along_equator():
    assert distance_km(Coordinate(0.0, 0.0), Coordinate(0.0, 0.008993)) == pytest.approx(1.0)


def test_paris_to_london():
    assert distance_km(*PAIRS[1]) == pytest.approx(343.5, abs=1.0)


@pytest.mark.parametrize("a, b", PAIRS)
def test_distance_is_symmetric(a, b):
    assert distance_km(a, b) == distance_km(b, a)
    assert haversine_km(a, b) == haversine_km(b, a)


@pytest.mark.parametrize("a", [pair[0] for pair in PAIRS])
def test_distance_to_self_is_zero(a):
    assert distance_km(a, a) == 0


def test_distance_is_rounded_but_haversine_is_not():
    a, b = Coordinate(0.0, 0.0), Coordinate(0.0, 0.00001)
    assert distance_km(a, b) == 0.0
    assert haversine_km(a, b) > 0.0


def test_out_of_range_coordinates_raise():
    with pytest.raises(ValueError):
        haversine_km(Coordinate(91.0, 0.0), Coordinate(0.0, 0.0))


@pytest.mark.parametrize(
    "dest, expected",
    [
        (Coordinate(1.0, 0.0), 0.0),
        (Coordinate(0.0, 1.0), 90.0),
        (Coordinate(-1.0, 0.0), 180.0),
        (Coordinate(0.0, -1.0), 270.0),
    ],
)
def test_bearing_cardinal_directions(dest, expected):
    assert bearing_degrees(Coordinate(0.0, 0.0), dest) == pytest.approx(expected)


@pytest.mark.parametrize("a, b", PAIRS)
def test_bearing_in_range(a, b):
    for x, y in ((a, b), (b, a)):
        assert 0 <= bearing_degrees(x, y) < 360


def test_bearing_just_west_of_north_folds_to_zero():
    assert bearing_degrees(Coordinate(0.0, 0.0), Coordinate(1.0, -1e-9)) == 0.0


def test_midpoint_on_equator():
    m = midpoint(Coordinate(0.0, 0.0), Coordinate(0.0, 90.0))
    assert m.latitude == pytest.approx(0.0, abs=1e-9)
    assert m.longitude == pytest.approx(45.0)


def test_midpoint_is_spherical_not_arithmetic():
    m = midpoint(Coordinate(60.0, 0.0), Coordinate(60.0, 90.0))
    # The great circle bulges poleward of the 60th parallel
    assert m.latitude > 60.0
    assert m.longitude == pytest.approx(45.0)


def test_within_radius():
    center = Coordinate(0.0, 0.0)
    assert within_radius(Coordinate(0.0, 0.008993), center, 1.0)
    assert not within_radius(Coordinate(0.0, 0.02), center, 1.0)


@pytest.mark.parametrize(
    "distance, seconds, expected",
    [(1.0, 60, 60.0), (5.0, 0, 0.0), (5.0, -10, 0.0), (10.0, 1800, 20.0), (1.0, 7, 514.29)],
)
def test_average_speed(distance, seconds, expected):
    assert average_speed_kmh(distance, seconds) == expected


@pytest.mark.parametrize(
    "deg, expected",
    [(0, "N"), (22.5, "NE"), (44, "NE"), (90, "E"), (180, "S"), (-90, "W"), (350, "N"), (725, "N")],
)
def test_degrees_to_cardinal(deg, expected):
    assert degrees_to_cardinal(deg) == expected


def test_normalize_heading():
    assert normalize_heading(-10) == 350
    assert normalize_heading(360) == 0
    assert normalize_heading(725) == 5


def test_format_coordinates():
    assert format_coordinates(-23.55052, -46.633308) == "23.550520°S, 46.633308°W"
    assert format_coordinates(51.5, 0.0) == "51.500000°N, 0.000000°E"
