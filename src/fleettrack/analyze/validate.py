# fleettrack/analyze/validate.py
"""
Per-point quality checks.

validate_point() is total: it reports problems in the returned
ValidationResult and never raises.
"""

from __future__ import annotations

from fleettrack.constants import (
    ACCEPTABLE_ACCURACY_M,
    GOOD_ACCURACY_M,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MAX_REALISTIC_SPEED_KMH,
    MAX_SPEED_KMH,
    MIN_ACCURACY_M,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    MIN_SPEED_KMH,
)
from fleettrack.geo.geodesy import haversine_km
from fleettrack.models import AccuracyLevel, TrackingPoint, ValidationResult


def coordinates_in_range(latitude: float, longitude: float) -> bool:
    return (
        MIN_LATITUDE <= latitude <= MAX_LATITUDE
        and MIN_LONGITUDE <= longitude <= MAX_LONGITUDE
    )


def validate_point(
    point: TrackingPoint,
    *,
    max_speed_kmh: float = MAX_SPEED_KMH,
    realistic_speed_kmh: float = MAX_REALISTIC_SPEED_KMH,
    acceptable_accuracy_m: float = ACCEPTABLE_ACCURACY_M,
    good_accuracy_m: float = GOOD_ACCURACY_M,
) -> ValidationResult:
    """
    Check coordinate bounds, speed plausibility and GPS accuracy of one point.

    Issues (point is invalid):
      - coordinates outside lat/lon ranges
      - speed outside [0, max_speed_kmh]
      - negative accuracy, or accuracy above acceptable_accuracy_m

    Warnings (point stays valid):
      - speed above realistic_speed_kmh
      - accuracy above good_accuracy_m
    """
    issues: list[str] = []
    warnings: list[str] = []

    if not coordinates_in_range(point.latitude, point.longitude):
        issues.append("coordinates out of range")

    speed = point.speed_kmh
    if speed is not None:
        if not (MIN_SPEED_KMH <= speed <= max_speed_kmh):
            issues.append(f"invalid speed: {speed}km/h")
        elif speed > realistic_speed_kmh:
            warnings.append(f"speed above realistic ceiling: {speed}km/h")

    accuracy = point.accuracy_m
    if accuracy is not None:
        if accuracy < MIN_ACCURACY_M:
            issues.append(f"invalid accuracy: {accuracy}m")
        else:
            if accuracy > good_accuracy_m:
                warnings.append(f"low accuracy: {accuracy}m")
            if accuracy > acceptable_accuracy_m:
                issues.append(f"unacceptable accuracy: {accuracy}m")

    return ValidationResult(is_valid=not issues, issues=tuple(issues), warnings=tuple(warnings))


def accuracy_level(accuracy_m: float) -> AccuracyLevel:
    if accuracy_m > 100:
        return AccuracyLevel.VERY_LOW
    if accuracy_m > ACCEPTABLE_ACCURACY_M:
        return AccuracyLevel.LOW
    if accuracy_m > GOOD_ACCURACY_M:
        return AccuracyLevel.ACCEPTABLE
    if accuracy_m > 10:
        return AccuracyLevel.GOOD
    return AccuracyLevel.EXCELLENT


def is_plausible_hop(
    prev: TrackingPoint,
    curr: TrackingPoint,
    *,
    max_speed_kmh: float = MAX_SPEED_KMH,
) -> bool:
    """
    True if a vehicle could have travelled from prev to curr without exceeding
    max_speed_kmh. Hops with no elapsed (or negative) time are implausible.
    """
    dt_s = (curr.recorded_at - prev.recorded_at).total_seconds()
    if dt_s <= 0:
        return False
    implied_kmh = (haversine_km(prev, curr) / dt_s) * 3600
    return implied_kmh <= max_speed_kmh
