"""GPX 1.1 serialization for recorded measurements."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from ..core.models import Measurement

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def format_time(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. ``2024-06-01T12:00:00.000Z``."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    utc = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return utc.isoformat(timespec="milliseconds") + "Z"


def format_coordinate(value: float) -> str:
    # repr() is the shortest string that round-trips to the same float.
    return repr(float(value))


def format_elevation(value: float) -> str:
    return f"{float(value):.1f}"


def build_gpx(
    measurements: Iterable[Measurement],
    *,
    creator: str = "TrackingApp",
    track_name: str = "Tracking Data",
) -> str:
    """
    Return a GPX document with one ``<trk>`` holding one ``<trkseg>``.

    Every measurement becomes a ``<trkpt lat lon>`` with ``<ele>`` (GPS
    altitude, one decimal) and ``<time>`` children, in the given order.
    """
    gpx = ET.Element("gpx")
    gpx.set("version", "1.1")
    gpx.set("creator", creator)
    gpx.set("xmlns", GPX_NAMESPACE)

    trk = ET.SubElement(gpx, "trk")
    ET.SubElement(trk, "name").text = track_name
    trkseg = ET.SubElement(trk, "trkseg")

    for m in measurements:
        trkpt = ET.SubElement(trkseg, "trkpt")
        trkpt.set("lat", format_coordinate(m.latitude))
        trkpt.set("lon", format_coordinate(m.longitude))
        ET.SubElement(trkpt, "ele").text = format_elevation(m.gps_altitude)
        ET.SubElement(trkpt, "time").text = format_time(m.timestamp)

    ET.indent(gpx, space="  ")
    return XML_DECLARATION + ET.tostring(gpx, encoding="unicode") + "\n"


def write_gpx(path: Path, document: str) -> None:
    """Write ``document`` as UTF-8. The parent directory must exist."""
    with Path(path).open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(document)
