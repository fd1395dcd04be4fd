# fleettrack/visualize/plot.py
"""
Plotting routines for fleettrack
"""

from typing import Sequence

import matplotlib.pyplot as plt

from fleettrack.analyze.track import compute_step_metrics
from fleettrack.models import StopSegment, TrackingPoint


def plot_route(points: Sequence[TrackingPoint], stops: Sequence[StopSegment] = (), *, show: bool = True):
    """
    Scatter the route coloured by step speed (km/h) and mark stop centroids.

    Returns the matplotlib Figure.
    """
    pts = sorted(points, key=lambda p: p.recorded_at)
    _, _, speeds = compute_step_metrics(pts)

    # compute_step_metrics drops zero-dt pairs; keep only the pairs it used
    steps = [p1 for p0, p1 in zip(pts, pts[1:]) if (p1.recorded_at - p0.recorded_at).total_seconds() > 0]
    lats = [p.latitude for p in steps]
    lons = [p.longitude for p in steps]

    fig, ax = plt.subplots(figsize=(8, 6))
    sc = ax.scatter(lons, lats, c=speeds, s=5, cmap="viridis")
    fig.colorbar(sc, ax=ax, label="Speed (km/h)")

    if stops:
        ax.scatter(
            [s.centroid.longitude for s in stops],
            [s.centroid.latitude for s in stops],
            marker="x", c="red", s=60, label="Stops",
        )
        ax.legend()

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Route coloured by speed")
    if show:
        plt.show()
    return fig
