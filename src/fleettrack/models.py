# fleettrack/models.py
"""
Value types for tracking analysis.

Every value here is immutable and created fresh by the call that produced it.
Nothing is shared between analysis calls.
"""

from __future__ import annotations

import datetime as _dt
import enum
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from fleettrack.constants import STOP_SPEED_KMH
from fleettrack.errors import InvalidPointError
from fleettrack.util.timeutils import from_epoch_seconds, parse_time_utc


def _require_finite(name: str, value: Optional[float]) -> None:
    if value is not None and not math.isfinite(value):
        raise InvalidPointError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _require_finite("latitude", self.latitude)
        _require_finite("longitude", self.longitude)


@dataclass(frozen=True)
class TrackingPoint:
    """
    A single timestamped vehicle-position sample.

    Non-finite values are rejected here. Finite but out-of-range values are
    accepted so that validate_point() can report them as issues.
    """

    latitude: float
    longitude: float
    recorded_at: _dt.datetime
    speed_kmh: Optional[float] = None
    accuracy_m: Optional[float] = None

    def __post_init__(self) -> None:
        _require_finite("latitude", self.latitude)
        _require_finite("longitude", self.longitude)
        _require_finite("speed_kmh", self.speed_kmh)
        _require_finite("accuracy_m", self.accuracy_m)
        if not isinstance(self.recorded_at, _dt.datetime):
            raise InvalidPointError(f"recorded_at must be a datetime, got {type(self.recorded_at).__name__}")
        # Naive timestamps are taken as UTC, same as parse_time_utc()
        if self.recorded_at.tzinfo is None:
            object.__setattr__(self, "recorded_at", self.recorded_at.replace(tzinfo=_dt.timezone.utc))

    @property
    def is_stop(self) -> bool:
        """True when the reported speed is below the stop threshold."""
        return self.speed_kmh is not None and self.speed_kmh < STOP_SPEED_KMH

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TrackingPoint":
        """
        Build a point from a plain record as supplied by the platform.

        Accepted keys:
          - latitude | lat
          - longitude | lon | lng
          - recorded_at | time    (datetime, ISO-8601 string, or epoch seconds)
          - speed | speed_kmh     (optional, km/h)
          - accuracy | accuracy_m (optional, meters)

        Raises:
          InvalidPointError if a required key is missing or a value is unusable.
        """
        lat = _pick(record, "latitude", "lat")
        lon = _pick(record, "longitude", "lon", "lng")
        when = _pick(record, "recorded_at", "time")
        if lat is None or lon is None or when is None:
            raise InvalidPointError(f"record is missing latitude/longitude/recorded_at: {dict(record)!r}")

        return cls(
            latitude=_as_float("latitude", lat),
            longitude=_as_float("longitude", lon),
            recorded_at=_as_datetime(when),
            speed_kmh=_as_optional_float("speed", _pick(record, "speed", "speed_kmh")),
            accuracy_m=_as_optional_float("accuracy", _pick(record, "accuracy", "accuracy_m")),
        )


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if record.get(k) is not None:
            return record[k]
    return None


def _as_float(name: str, v: Any) -> float:
    if isinstance(v, bool):
        raise InvalidPointError(f"{name} must be numeric, got {v!r}")
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise InvalidPointError(f"{name} must be numeric, got {v!r}") from e


def _as_optional_float(name: str, v: Any) -> Optional[float]:
    return None if v is None else _as_float(name, v)


def _as_datetime(v: Any) -> _dt.datetime:
    if isinstance(v, _dt.datetime):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        try:
            return from_epoch_seconds(v)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidPointError(f"epoch recorded_at out of range: {v!r}") from e
    if isinstance(v, str):
        dt = parse_time_utc(v)
        if dt is not None:
            return dt
    raise InvalidPointError(f"unparseable recorded_at: {v!r}")


@dataclass(frozen=True)
class ValidationResult:
    """Quality verdict for one point. Issues are hard failures, warnings are soft flags."""

    is_valid: bool
    issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class AccuracyLevel(str, enum.Enum):
    EXCELLENT = "EXCELLENT"    # <= 10 m
    GOOD = "GOOD"              # <= 20 m
    ACCEPTABLE = "ACCEPTABLE"  # <= 50 m
    LOW = "LOW"                # <= 100 m
    VERY_LOW = "VERY_LOW"


@dataclass(frozen=True)
class StopSegment:
    """
    A contiguous low-speed run lasting at least the minimum stop duration.

    start_index/end_index are inclusive indices into the time-sorted sequence
    the detector was given. The centroid is the arithmetic mean of the run's
    coordinates, not a geodesic centroid.
    """

    start_index: int
    end_index: int
    duration_seconds: float
    centroid: Coordinate
    started_at: _dt.datetime
    ended_at: _dt.datetime

    @property
    def point_count(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass(frozen=True)
class RouteStatistics:
    """
    Aggregate metrics for a route.

    Distances/speeds are rounded to 2 decimals and durations to whole seconds.
    """

    total_distance_km: float = 0.0
    total_time_seconds: int = 0
    average_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0
    total_stops: int = 0
    total_stop_time_seconds: int = 0
    moving_time_seconds: int = 0
    idle_time_seconds: int = 0

    @classmethod
    def zero(cls) -> "RouteStatistics":
        return cls()

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DistanceAndBearing:
    distance_km: float
    bearing_degrees: float


@dataclass(frozen=True)
class Leg:
    """Kinematics of the hop between two timed points."""

    distance_km: float
    time_seconds: float
    average_speed_kmh: float
    bearing_degrees: float


@dataclass(frozen=True)
class TrackAnalysis:
    """Everything the facade derives from one point batch."""

    statistics: RouteStatistics
    stops: list[StopSegment] = field(default_factory=list)
    simplified: list[TrackingPoint] = field(default_factory=list)
    accepted_points: int = 0
    rejected_points: int = 0
