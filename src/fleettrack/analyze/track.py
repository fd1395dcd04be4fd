# fleettrack/analyze/track.py
"""
Track analysis functions for fleettrack
"""

from __future__ import annotations

from typing import Sequence

from fleettrack.constants import STOP_SPEED_KMH
from fleettrack.geo.geodesy import haversine_km
from fleettrack.models import RouteStatistics, TrackingPoint


def compute_step_metrics(points: Sequence[TrackingPoint]):
    """Return per-segment dt (s), distance (km), speed (km/h)."""
    dts = []
    ds = []
    vs = []

    for p0, p1 in zip(points, points[1:]):
        dt_s = (p1.recorded_at - p0.recorded_at).total_seconds()
        if dt_s <= 0:
            continue

        d_km = haversine_km(p0, p1)
        v = d_km / dt_s * 3600

        dts.append(dt_s)
        ds.append(d_km)
        vs.append(v)

    return dts, ds, vs


def route_statistics(
    points: Sequence[TrackingPoint],
    *,
    stop_speed_kmh: float = STOP_SPEED_KMH,
) -> RouteStatistics:
    """
    Aggregate distance, time, speed and stop metrics in one pass.

    Points are sorted by time first. Each consecutive pair contributes its
    distance; its time delta goes to stop/idle time when the later point is
    below the stop threshold, otherwise to moving time. A stop is counted once
    per contiguous stretch of stopped pairs.

    Fewer than 2 points gives all-zero statistics.
    """
    if len(points) < 2:
        return RouteStatistics.zero()

    pts = sorted(points, key=lambda p: p.recorded_at)

    def stopped(p: TrackingPoint) -> bool:
        return p.speed_kmh is not None and p.speed_kmh < stop_speed_kmh

    total_distance = 0.0
    stop_time = 0.0
    moving_time = 0.0
    total_stops = 0
    speeds = [p.speed_kmh for p in pts if p.speed_kmh is not None]
    max_speed = max(speeds, default=0.0)

    prev_pair_stopped = False
    for prev, curr in zip(pts, pts[1:]):
        total_distance += haversine_km(prev, curr)
        dt_s = (curr.recorded_at - prev.recorded_at).total_seconds()

        if stopped(curr):
            stop_time += dt_s
            if not prev_pair_stopped:
                total_stops += 1
            prev_pair_stopped = True
        else:
            moving_time += dt_s
            prev_pair_stopped = False

    total_time = (pts[-1].recorded_at - pts[0].recorded_at).total_seconds()
    average_speed = (total_distance / moving_time) * 3600 if moving_time > 0 else 0.0

    return RouteStatistics(
        total_distance_km=round(total_distance, 2),
        total_time_seconds=round(total_time),
        average_speed_kmh=round(average_speed, 2),
        max_speed_kmh=round(max_speed, 2),
        total_stops=total_stops,
        total_stop_time_seconds=round(stop_time),
        moving_time_seconds=round(moving_time),
        idle_time_seconds=round(stop_time),
    )
