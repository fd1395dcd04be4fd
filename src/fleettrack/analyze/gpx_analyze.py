#!/usr/bin/env python3
"""
fleettrack-analyze: print route statistics, stops and simplification results
for one or more GPX tracks.

Thresholds come from fleettrack.config (env > user config > repo config >
defaults); CLI flags override everything.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, replace
from pathlib import Path

from fleettrack.analyze.facade import TrackingAnalysis
from fleettrack.config import load_config
from fleettrack.errors import FleetTrackError
from fleettrack.formats.gpx import read_trackpoints
from fleettrack.geo.geodesy import format_coordinates
from fleettrack.models import TrackAnalysis
from fleettrack.util.logging import log, utc_now_iso

TSV_HEADER = (
    "file\tpoints\trejected\tdistance_km\tduration_s\tmoving_s\tidle_s"
    "\tavg_speed_kmh\tmax_speed_kmh\tstops\tsimplified_points"
)


def print_report(path: Path, result: TrackAnalysis, *, tsv: bool) -> None:
    stats = result.statistics
    if tsv:
        print(
            f"{path}\t"
            f"{result.accepted_points}\t"
            f"{result.rejected_points}\t"
            f"{stats.total_distance_km:.2f}\t"
            f"{stats.total_time_seconds}\t"
            f"{stats.moving_time_seconds}\t"
            f"{stats.idle_time_seconds}\t"
            f"{stats.average_speed_kmh:.2f}\t"
            f"{stats.max_speed_kmh:.2f}\t"
            f"{stats.total_stops}\t"
            f"{len(result.simplified)}"
        )
        return

    print(f"\n{path}")
    print(f"  points          : {result.accepted_points} ({result.rejected_points} rejected)")
    print(f"  distance (km)   : {stats.total_distance_km:.2f}")
    print(f"  duration (s)    : {stats.total_time_seconds}")
    print(f"  moving (s)      : {stats.moving_time_seconds}")
    print(f"  idle (s)        : {stats.idle_time_seconds}")
    print(f"  avg speed km/h  : {stats.average_speed_kmh:.2f}")
    print(f"  max speed km/h  : {stats.max_speed_kmh:.2f}")
    print(f"  stops           : {stats.total_stops}")
    for s in result.stops:
        where = format_coordinates(s.centroid.latitude, s.centroid.longitude)
        print(f"    - {s.started_at.isoformat()}  {s.duration_seconds:.0f}s  at {where}")
    print(f"  simplified pts  : {len(result.simplified)}")


def report_doc(path: Path, result: TrackAnalysis) -> dict:
    return {
        "file": str(path),
        "generated_utc": utc_now_iso(),
        "accepted_points": result.accepted_points,
        "rejected_points": result.rejected_points,
        "statistics": result.statistics.as_dict(),
        "stops": [
            {
                "start_index": s.start_index,
                "end_index": s.end_index,
                "duration_seconds": s.duration_seconds,
                "centroid": asdict(s.centroid),
                "started_at": s.started_at.isoformat(),
                "ended_at": s.ended_at.isoformat(),
            }
            for s in result.stops
        ],
        "simplified_points": len(result.simplified),
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="fleettrack: analyze GPX track(s).")
    ap.add_argument("gpx", nargs="+", help="One or more GPX files.")
    fmt = ap.add_mutually_exclusive_group()
    fmt.add_argument("--tsv", action="store_true",
                     help="Print tab-separated output (good for piping).")
    fmt.add_argument("--json", action="store_true",
                     help="Print one JSON document per file.")
    ap.add_argument("--min-stop-s", type=float, default=None,
                    help="Minimum stop duration in seconds (default: from config).")
    ap.add_argument("--tolerance-km", type=float, default=None,
                    help="Simplification tolerance in km (default: from config).")
    ap.add_argument("--plot", action="store_true",
                    help="Show a speed-coloured plot of each track.")
    ap.add_argument("--verbose", action="store_true", help="More logging.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = load_config()
    settings = cfg.analysis
    if args.min_stop_s is not None:
        settings = replace(settings, min_stop_duration_s=args.min_stop_s)
    if args.tolerance_km is not None:
        settings = replace(settings, simplify_tolerance_km=args.tolerance_km)
    analysis = TrackingAnalysis(settings)

    if args.verbose:
        for key, origin in sorted(cfg.source.items()):
            log(f"{key} = {getattr(settings, key.split('.', 1)[1])}  ({origin})")

    if args.tsv:
        print(TSV_HEADER)

    failures = 0
    for raw in args.gpx:
        path = Path(raw).expanduser()
        if not path.is_file():
            log(f"Skipping (not a file): {path}")
            failures += 1
            continue
        try:
            points = read_trackpoints(path)
            result = analysis.analyze(points)
        except FleetTrackError as e:
            log(f"ERROR: {path}: {e}")
            failures += 1
            continue

        if args.json:
            print(json.dumps(report_doc(path, result), indent=2))
        else:
            print_report(path, result, tsv=args.tsv)

        if args.plot:
            from fleettrack.visualize.plot import plot_route
            plot_route(points, result.stops)

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
