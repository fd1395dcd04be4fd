# fleettrack/analyze/simplify.py
"""
Point-count reduction for stored trajectories.

This is a local redundancy filter, not Douglas-Peucker: an interior point is
dropped when its two neighbours are nearly coincident, i.e. the vehicle
barely moved across the three-point window. The point's own deviation from
the neighbour chord is not considered.
"""

from __future__ import annotations

import math
from typing import Sequence

from fleettrack.constants import SIMPLIFY_TOLERANCE_KM
from fleettrack.errors import InvalidParameterError
from fleettrack.geo.geodesy import haversine_km
from fleettrack.models import TrackingPoint


def simplify_route(
    points: Sequence[TrackingPoint],
    tolerance_km: float = SIMPLIFY_TOLERANCE_KM,
) -> list[TrackingPoint]:
    """
    Drop interior points whose neighbours are within `tolerance_km` of each other.

    First and last points are always kept and input order is preserved.
    Two points or fewer are returned unchanged.

    Raises:
      InvalidParameterError for a negative or non-finite tolerance.
    """
    if not math.isfinite(tolerance_km) or tolerance_km < 0:
        raise InvalidParameterError(f"tolerance_km must be >= 0, got {tolerance_km!r}")

    if len(points) <= 2:
        return list(points)

    kept = [points[0]]
    for prev, cur, nxt in zip(points, points[1:], points[2:]):
        if haversine_km(prev, nxt) > tolerance_km:
            kept.append(cur)
    kept.append(points[-1])
    return kept
