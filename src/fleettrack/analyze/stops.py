# fleettrack/analyze/stops.py
"""
Stop detection over a time-ordered point sequence.

A stop is a contiguous run of points whose reported speed is below the stop
threshold, lasting at least `min_duration_seconds` from its first to its last
point. Points without a speed can neither start nor continue a run.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from fleettrack.constants import MIN_STOP_DURATION_S, STOP_SPEED_KMH
from fleettrack.errors import InvalidParameterError
from fleettrack.models import Coordinate, StopSegment, TrackingPoint

logger = logging.getLogger(__name__)


def _check_min_duration(min_duration_seconds: float) -> None:
    if not math.isfinite(min_duration_seconds) or min_duration_seconds <= 0:
        raise InvalidParameterError(
            f"min_duration_seconds must be a positive number, got {min_duration_seconds!r}"
        )


def _close_run(
    pts: Sequence[TrackingPoint],
    start: int,
    end: int,
    lat_sum: float,
    lon_sum: float,
    min_duration_seconds: float,
) -> Optional[StopSegment]:
    """Turn the run pts[start..end] into a StopSegment if it lasted long enough."""
    first = pts[start]
    last = pts[end]
    duration = (last.recorded_at - first.recorded_at).total_seconds()
    if duration < min_duration_seconds:
        return None

    n = end - start + 1
    return StopSegment(
        start_index=start,
        end_index=end,
        duration_seconds=duration,
        centroid=Coordinate(latitude=lat_sum / n, longitude=lon_sum / n),
        started_at=first.recorded_at,
        ended_at=last.recorded_at,
    )


def detect_stops(
    points: Sequence[TrackingPoint],
    min_duration_seconds: float = MIN_STOP_DURATION_S,
    *,
    stop_speed_kmh: float = STOP_SPEED_KMH,
) -> list[StopSegment]:
    """
    Segment low-speed intervals into discrete stops.

    Args:
      points: Track points (can be unsorted; a sorted copy is scanned).
      min_duration_seconds: Shortest run that counts as a stop.
      stop_speed_kmh: Speeds strictly below this are "stopped".

    Returns:
      Stops in time order. Indices refer to the time-sorted sequence.

    Raises:
      InvalidParameterError if min_duration_seconds is not positive.
    """
    _check_min_duration(min_duration_seconds)

    if len(points) < 2:
        return []

    pts = sorted(points, key=lambda p: p.recorded_at)

    stops: list[StopSegment] = []
    run_start: Optional[int] = None
    lat_sum = 0.0
    lon_sum = 0.0

    for i, p in enumerate(pts):
        stopped = p.speed_kmh is not None and p.speed_kmh < stop_speed_kmh

        if stopped:
            if run_start is None:
                run_start = i
                lat_sum = 0.0
                lon_sum = 0.0
            lat_sum += p.latitude
            lon_sum += p.longitude
            continue

        if run_start is not None:
            seg = _close_run(pts, run_start, i - 1, lat_sum, lon_sum, min_duration_seconds)
            if seg is not None:
                stops.append(seg)
            run_start = None

    # Run still open at the end of the track
    if run_start is not None:
        seg = _close_run(pts, run_start, len(pts) - 1, lat_sum, lon_sum, min_duration_seconds)
        if seg is not None:
            stops.append(seg)

    logger.debug("detect_stops: %d points -> %d stops", len(pts), len(stops))
    return stops
