# fleettrack/formats/gpx.py
"""
GPX helpers for fleettrack

This module is intentionally format-focused:
- GPX namespace handling
- safely reading an ElementTree
- turning <trkpt> elements into TrackingPoint values

It feeds developer tooling (the analyze CLI, plotting). The analysis engine
itself never reads files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from fleettrack.errors import InvalidGpxError, InvalidPointError
from fleettrack.models import TrackingPoint
from fleettrack.util.timeutils import parse_time_utc

# GPX 1.1 default namespace
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}

MPS_TO_KMH = 3.6


def _local_name(tag: str) -> str:
    """Strip the "{namespace-uri}" prefix ElementTree puts on namespaced tags."""
    return tag.rsplit("}", 1)[-1]


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError if the file cannot be read or is not well-formed XML.
    """
    try:
        return ET.parse(path)
    except (ET.ParseError, OSError) as e:
        raise InvalidGpxError(f"Failed to read GPX: {path} ({e})") from e


def _float_or_none(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _extension_value(trkpt: ET.Element, name: str) -> Optional[float]:
    """
    Look up a numeric value by local tag name anywhere under <extensions>.

    Garmin writes speed as <gpxtpx:TrackPointExtension><gpxtpx:speed>, other
    apps put <speed> directly under <extensions>; matching on the local name
    covers both.
    """
    ext = trkpt.find("gpx:extensions", GPX_NS)
    if ext is None:
        return None
    for el in ext.iter():
        if _local_name(el.tag) == name:
            return _float_or_none(el.text)
    return None


def extract_trackpoints(tree: ET.ElementTree) -> list[TrackingPoint]:
    """
    Extract ordered trackpoints from a GPX tree.

    - points without a parseable <time> are skipped
    - speed (m/s in GPX) is converted to km/h
    - <hdop> is not an accuracy in meters, so accuracy stays unset
    """
    root = tree.getroot()
    pts: list[TrackingPoint] = []

    for trkpt in root.findall(".//gpx:trkpt", GPX_NS):
        time = parse_time_utc(trkpt.findtext("gpx:time", default="", namespaces=GPX_NS))
        if time is None:
            continue   # skip points without timestamps

        lat = _float_or_none(trkpt.get("lat"))
        lon = _float_or_none(trkpt.get("lon"))
        if lat is None or lon is None:
            raise InvalidGpxError(f"trkpt without usable lat/lon at {time.isoformat()}")

        speed_mps = _extension_value(trkpt, "speed")
        speed_kmh = speed_mps * MPS_TO_KMH if speed_mps is not None else None

        try:
            pts.append(TrackingPoint(latitude=lat, longitude=lon, recorded_at=time, speed_kmh=speed_kmh))
        except InvalidPointError as e:
            raise InvalidGpxError(str(e)) from e

    return pts


def read_trackpoints(path: Path) -> list[TrackingPoint]:
    """Read and extract trackpoints from a GPX file in one step."""
    return extract_trackpoints(read_gpx(path))
