"""
Threshold constants for tracking analysis.

These are the hard defaults. fleettrack.config layers TOML and environment
overrides on top of the ones that are tunable.
"""

from __future__ import annotations

from typing import Final

EARTH_RADIUS_KM: Final[float] = 6371.0

# Coordinate bounds (WGS84 degrees)
MIN_LATITUDE: Final[float] = -90.0
MAX_LATITUDE: Final[float] = 90.0
MIN_LONGITUDE: Final[float] = -180.0
MAX_LONGITUDE: Final[float] = 180.0

# Speed (km/h)
MIN_SPEED_KMH: Final[float] = 0.0
MAX_SPEED_KMH: Final[float] = 300.0
MAX_REALISTIC_SPEED_KMH: Final[float] = 150.0  # commercial vehicles

# Accuracy (meters)
MIN_ACCURACY_M: Final[float] = 0.0
GOOD_ACCURACY_M: Final[float] = 20.0
ACCEPTABLE_ACCURACY_M: Final[float] = 50.0

# Stop detection
STOP_SPEED_KMH: Final[float] = 5.0
MIN_STOP_DURATION_MIN: Final[float] = 2.0
MIN_STOP_DURATION_S: Final[float] = MIN_STOP_DURATION_MIN * 60

# Simplification
SIMPLIFY_TOLERANCE_KM: Final[float] = 0.0001

# Callers page point batches at this size
MAX_BATCH_POINTS: Final[int] = 500
