# fleettrack/geo/geodesy.py
"""
Great-circle math over WGS84 latitude/longitude pairs.

Functions accept any object exposing `latitude` and `longitude` attributes
(TrackingPoint, Coordinate, ...). Public distance and bearing results are
rounded to 2 decimals; aggregation code uses haversine_km() to avoid
compounding rounding error.
"""

from __future__ import annotations

import math
from typing import Protocol

from haversine import Unit, haversine

from fleettrack.constants import EARTH_RADIUS_KM
from fleettrack.models import Coordinate

_CARDINALS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


class LatLon(Protocol):
    latitude: float
    longitude: float


def haversine_km(a: LatLon, b: LatLon) -> float:
    """
    Unrounded great-circle distance in kilometers (Earth radius 6371 km).

    Raises:
      ValueError if a coordinate is outside [-90, 90] / [-180, 180].
    """
    angle = haversine((a.latitude, a.longitude), (b.latitude, b.longitude), unit=Unit.RADIANS)
    return angle * EARTH_RADIUS_KM


def distance_km(a: LatLon, b: LatLon) -> float:
    """Haversine distance in kilometers, rounded to 2 decimals."""
    return round(haversine_km(a, b), 2)


def bearing_degrees(a: LatLon, b: LatLon) -> float:
    """Initial bearing from a to b in degrees clockwise from true north, in [0, 360)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)

    bearing = round((math.degrees(math.atan2(y, x)) + 360.0) % 360.0, 2)
    # 359.999 rounds up to 360.0
    return 0.0 if bearing >= 360.0 else bearing


def midpoint(a: LatLon, b: LatLon) -> Coordinate:
    """Great-circle midpoint between a and b."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    lon1 = math.radians(a.longitude)
    d_lon = math.radians(b.longitude - a.longitude)

    bx = math.cos(lat2) * math.cos(d_lon)
    by = math.cos(lat2) * math.sin(d_lon)

    lat3 = math.atan2(
        math.sin(lat1) + math.sin(lat2),
        math.sqrt((math.cos(lat1) + bx) ** 2 + by ** 2),
    )
    lon3 = lon1 + math.atan2(by, math.cos(lat1) + bx)

    return Coordinate(latitude=math.degrees(lat3), longitude=math.degrees(lon3))


def within_radius(point: LatLon, center: LatLon, radius_km: float) -> bool:
    """Geofence check: is `point` within `radius_km` of `center`?"""
    return distance_km(point, center) <= radius_km


def average_speed_kmh(distance_km: float, seconds: float) -> float:
    """Average speed in km/h; 0 when no time has elapsed."""
    if seconds <= 0:
        return 0.0
    return round((distance_km / seconds) * 3600, 2)


def normalize_heading(degrees: float) -> float:
    """Fold any heading into [0, 360)."""
    return degrees % 360.0


def degrees_to_cardinal(degrees: float) -> str:
    """Map a heading onto the 8-point compass rose."""
    index = int(normalize_heading(degrees) / 45 + 0.5) % 8
    return _CARDINALS[index]


def format_coordinates(latitude: float, longitude: float) -> str:
    """Human-readable coordinates, e.g. "23.550520°S, 46.633308°W"."""
    lat_dir = "N" if latitude >= 0 else "S"
    lon_dir = "E" if longitude >= 0 else "W"
    return f"{abs(latitude):.6f}°{lat_dir}, {abs(longitude):.6f}°{lon_dir}"
