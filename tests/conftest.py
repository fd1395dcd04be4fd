import datetime as dt
from pathlib import Path

import pytest

from fleettrack.config import ENV_MAP
from fleettrack.models import TrackingPoint

T0 = dt.datetime(2025, 4, 26, 12, 0, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def make_point():
    """Factory: make_point(lat, lon, t_s, speed=None, accuracy=None), t_s seconds after T0."""

    def _make(lat, lon, t_s=0, speed=None, accuracy=None):
        return TrackingPoint(
            latitude=lat,
            longitude=lon,
            recorded_at=T0 + dt.timedelta(seconds=t_s),
            speed_kmh=speed,
            accuracy_m=accuracy,
        )

    return _make


@pytest.fixture
def stop_then_go(make_point):
    """Five speed-0 points over 180 s, then one point moving at 30 km/h."""
    stopped = [
        make_point(-23.5500, -46.6300, 0, speed=0.0),
        make_point(-23.5501, -46.6301, 45, speed=0.0),
        make_point(-23.5502, -46.6300, 90, speed=0.0),
        make_point(-23.5501, -46.6299, 135, speed=0.0),
        make_point(-23.5500, -46.6300, 180, speed=0.0),
    ]
    return stopped + [make_point(-23.5450, -46.6300, 240, speed=30.0)]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_MAP:
        monkeypatch.delenv(var, raising=False)
