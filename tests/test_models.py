import datetime as dt

import pytest

from fleettrack.errors import InvalidPointError
from fleettrack.models import Coordinate, RouteStatistics, TrackingPoint


def test_from_record_with_platform_keys():
    p = TrackingPoint.from_record(
        {
            "latitude": "-23.55",
            "longitude": -46.63,
            "recorded_at": "2025-04-26T12:00:00Z",
            "speed": 42,
            "accuracy": 8.5,
        }
    )
    assert p.latitude == -23.55
    assert p.recorded_at == dt.datetime(2025, 4, 26, 12, tzinfo=dt.timezone.utc)
    assert p.speed_kmh == 42.0
    assert p.accuracy_m == 8.5


def test_from_record_short_keys_and_epoch():
    p = TrackingPoint.from_record({"lat": 1.0, "lng": 2.0, "time": 0})
    assert p.longitude == 2.0
    assert p.recorded_at == dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)
    assert p.speed_kmh is None
    assert p.accuracy_m is None


@pytest.mark.parametrize(
    "record",
    [
        {"latitude": 0.0, "recorded_at": "2025-04-26T12:00:00Z"},
        {"latitude": 0.0, "longitude": 0.0},
        {"latitude": "north", "longitude": 0.0, "recorded_at": 0},
        {"latitude": 0.0, "longitude": 0.0, "recorded_at": "yesterday"},
        {"latitude": "nan", "longitude": 0.0, "recorded_at": 0},
        {"lat": 0.0, "lon": 0.0, "time": 1e20},
        {"lat": 0.0, "lon": 0.0, "time": -1e20},
    ],
)
def test_from_record_rejects_unusable_records(record):
    with pytest.raises(InvalidPointError):
        TrackingPoint.from_record(record)


def test_is_stop_is_derived_from_speed(make_point):
    assert make_point(0.0, 0.0, speed=4.9).is_stop
    assert not make_point(0.0, 0.0, speed=5.0).is_stop
    assert not make_point(0.0, 0.0).is_stop


def test_zero_statistics():
    assert RouteStatistics.zero().as_dict() == {
        "total_distance_km": 0.0,
        "total_time_seconds": 0,
        "average_speed_kmh": 0.0,
        "max_speed_kmh": 0.0,
        "total_stops": 0,
        "total_stop_time_seconds": 0,
        "moving_time_seconds": 0,
        "idle_time_seconds": 0,
    }


def test_naive_recorded_at_is_taken_as_utc():
    p = TrackingPoint(0.0, 0.0, dt.datetime(2025, 4, 26, 12))
    assert p.recorded_at == dt.datetime(2025, 4, 26, 12, tzinfo=dt.timezone.utc)
    assert p.recorded_at.tzinfo is not None


@pytest.mark.parametrize("lat, lon", [(float("nan"), 0.0), (0.0, float("inf")), (float("-inf"), 0.0)])
def test_coordinate_rejects_non_finite_values(lat, lon):
    with pytest.raises(InvalidPointError):
        Coordinate(lat, lon)
