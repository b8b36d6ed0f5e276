"""Parse GPX track points back into plain records."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class TrackPoint:
    latitude: float
    longitude: float
    elevation: Optional[float] = None
    time: Optional[datetime] = None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def parse_time(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_gpx(document: str) -> List[TrackPoint]:
    """Return all ``<trkpt>`` entries of ``document`` in document order."""
    root = ET.fromstring(document)
    points: List[TrackPoint] = []
    for element in root.iter():
        if _local_name(element.tag) != "trkpt":
            continue
        try:
            lat = float(element.attrib["lat"])
            lon = float(element.attrib["lon"])
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Invalid trkpt attributes: {element.attrib!r}") from exc
        ele_text = _child_text(element, "ele")
        time_text = _child_text(element, "time")
        points.append(
            TrackPoint(
                latitude=lat,
                longitude=lon,
                elevation=float(ele_text) if ele_text is not None else None,
                time=parse_time(time_text) if time_text is not None else None,
            )
        )
    return points


def read_gpx(path: Path) -> List[TrackPoint]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return parse_gpx(fh.read())
