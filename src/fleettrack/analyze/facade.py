# fleettrack/analyze/facade.py
"""
Tracking-analysis facade.

This is the single integration point for the surrounding service layer. It
accepts raw point batches (TrackingPoint objects or plain mappings), filters
them through the point validator, sorts the survivors by time and feeds the
same sequence into route statistics, stop detection and simplification.
None of those analyses depends on another's output.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Optional, Union

from fleettrack.analyze.simplify import simplify_route
from fleettrack.analyze.stops import detect_stops
from fleettrack.analyze.track import route_statistics
from fleettrack.analyze.validate import validate_point
from fleettrack.config import AnalysisSettings, load_config
from fleettrack.errors import InvalidParameterError, InvalidPointError
from fleettrack.geo import geodesy
from fleettrack.models import (
    Coordinate,
    DistanceAndBearing,
    Leg,
    RouteStatistics,
    StopSegment,
    TrackAnalysis,
    TrackingPoint,
    ValidationResult,
    _as_float,
)

logger = logging.getLogger(__name__)

PointLike = Union[TrackingPoint, Mapping[str, Any]]


def as_point(p: PointLike) -> TrackingPoint:
    if isinstance(p, TrackingPoint):
        return p
    return TrackingPoint.from_record(p)


class TrackingAnalysis:
    """Composes validation, statistics, stop detection and simplification."""

    def __init__(self, settings: Optional[AnalysisSettings] = None) -> None:
        self.settings = settings or AnalysisSettings()

    @classmethod
    def from_config(cls, **kwargs: Any) -> "TrackingAnalysis":
        """Build a facade from load_config(); kwargs are passed through to it."""
        return cls(load_config(**kwargs).analysis)

    # ------------------------------------------------------------------
    # Point quality
    # ------------------------------------------------------------------
    def validate_point(self, point: PointLike) -> ValidationResult:
        s = self.settings
        return validate_point(
            as_point(point),
            max_speed_kmh=s.max_speed_kmh,
            realistic_speed_kmh=s.realistic_speed_kmh,
            acceptable_accuracy_m=s.acceptable_accuracy_m,
            good_accuracy_m=s.good_accuracy_m,
        )

    def prepare(self, points: Iterable[PointLike]) -> tuple[list[TrackingPoint], int]:
        """
        Validate and time-sort a batch.

        Returns:
          (valid points sorted by recorded_at, number of rejected points)
        """
        batch = [as_point(p) for p in points]
        if len(batch) > self.settings.max_batch_points:
            logger.warning(
                "Batch of %d points exceeds the %d-point ceiling; callers should page their input",
                len(batch), self.settings.max_batch_points,
            )

        valid: list[TrackingPoint] = []
        rejected = 0
        for p in batch:
            result = self.validate_point(p)
            if result.is_valid:
                valid.append(p)
            else:
                rejected += 1
                logger.debug("Rejected point at %s: %s", p.recorded_at, "; ".join(result.issues))

        if rejected:
            logger.warning("%d of %d points failed validation", rejected, len(batch))

        valid.sort(key=lambda p: p.recorded_at)
        return valid, rejected

    # ------------------------------------------------------------------
    # Analyses
    # ------------------------------------------------------------------
    def route_statistics(self, points: Iterable[PointLike]) -> RouteStatistics:
        valid, _ = self.prepare(points)
        logger.debug("Computing statistics for %d points", len(valid))

        if len(valid) < 2:
            logger.warning("Not enough valid points to compute statistics")
            return RouteStatistics.zero()

        stats = route_statistics(valid, stop_speed_kmh=self.settings.stop_speed_kmh)
        logger.info(
            "Statistics computed: %skm, %ss, %skm/h",
            stats.total_distance_km, stats.total_time_seconds, stats.average_speed_kmh,
        )
        return stats

    def detect_stops(
        self,
        points: Iterable[PointLike],
        min_duration_seconds: Optional[float] = None,
    ) -> list[StopSegment]:
        if min_duration_seconds is None:
            min_duration_seconds = self.settings.min_stop_duration_s
        valid, _ = self.prepare(points)
        logger.debug("Detecting stops in %d points", len(valid))

        stops = detect_stops(valid, min_duration_seconds, stop_speed_kmh=self.settings.stop_speed_kmh)
        logger.info("%d stops detected", len(stops))
        return stops

    def simplify_route(
        self,
        points: Iterable[PointLike],
        tolerance_km: Optional[float] = None,
    ) -> list[TrackingPoint]:
        if tolerance_km is None:
            tolerance_km = self.settings.simplify_tolerance_km
        valid, _ = self.prepare(points)
        logger.debug("Simplifying route of %d points with tolerance %s", len(valid), tolerance_km)

        simplified = simplify_route(valid, tolerance_km)
        logger.info("Route simplified: %d -> %d points", len(valid), len(simplified))
        return simplified

    def analyze(self, points: Iterable[PointLike], *, simplify: bool = True) -> TrackAnalysis:
        """Validate once, then run every analysis over the same sorted sequence."""
        s = self.settings
        valid, rejected = self.prepare(points)

        stats = route_statistics(valid, stop_speed_kmh=s.stop_speed_kmh)
        stops = detect_stops(valid, s.min_stop_duration_s, stop_speed_kmh=s.stop_speed_kmh)
        simplified = simplify_route(valid, s.simplify_tolerance_km) if simplify else []

        logger.info(
            "Analyzed %d points (%d rejected): %skm, %d stops, %d points after simplification",
            len(valid), rejected, stats.total_distance_km, len(stops), len(simplified),
        )
        return TrackAnalysis(
            statistics=stats,
            stops=stops,
            simplified=simplified,
            accepted_points=len(valid),
            rejected_points=rejected,
        )

    # ------------------------------------------------------------------
    # Point-pair helpers
    # ------------------------------------------------------------------
    def distance_and_bearing(self, a: PointLike, b: PointLike) -> DistanceAndBearing:
        pa, pb = as_point(a), as_point(b)
        return DistanceAndBearing(
            distance_km=geodesy.distance_km(pa, pb),
            bearing_degrees=geodesy.bearing_degrees(pa, pb),
        )

    def distance_and_time(self, a: PointLike, b: PointLike) -> Leg:
        pa, pb = as_point(a), as_point(b)
        distance = geodesy.distance_km(pa, pb)
        seconds = (pb.recorded_at - pa.recorded_at).total_seconds()
        return Leg(
            distance_km=distance,
            time_seconds=seconds,
            average_speed_kmh=geodesy.average_speed_kmh(distance, seconds),
            bearing_degrees=geodesy.bearing_degrees(pa, pb),
        )

    def is_point_in_area(
        self,
        point: Union[PointLike, Coordinate],
        center: Union[PointLike, Coordinate],
        radius_km: float,
    ) -> bool:
        """Geofence check. Points, coordinates or lat/lon mappings are accepted for both ends."""
        if not math.isfinite(radius_km) or radius_km <= 0:
            raise InvalidParameterError(f"radius_km must be positive, got {radius_km!r}")
        return geodesy.within_radius(_as_coordinate(point), _as_coordinate(center), radius_km)


def _as_coordinate(x: Union[PointLike, Coordinate]) -> Coordinate:
    if isinstance(x, Coordinate):
        return x
    if isinstance(x, TrackingPoint):
        return x.coordinate
    lat = x.get("latitude", x.get("lat"))
    lon = x.get("longitude", x.get("lon", x.get("lng")))
    if lat is None or lon is None:
        raise InvalidPointError(f"mapping has no latitude/longitude: {dict(x)!r}")
    return Coordinate(latitude=_as_float("latitude", lat), longitude=_as_float("longitude", lon))
