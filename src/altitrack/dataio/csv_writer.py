"""CSV writing helpers for recorded measurements."""

import csv
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..core.models import Measurement
from .gpx_writer import format_time

MEASUREMENT_HEADERS = (
    "timestamp_utc",
    "latitude",
    "longitude",
    "gps_altitude_m",
    "altimeter_height_m",
)


def write_rows(path: Path, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    """
    Write a header row and all data rows to a CSV file.

    Directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(headers)
        writer.writerows(rows)


def write_measurements(path: Path, measurements: Iterable[Measurement]) -> None:
    """Write one row per measurement; a missing barometer altitude is an empty cell."""
    rows = (
        (
            format_time(m.timestamp),
            repr(m.latitude),
            repr(m.longitude),
            f"{m.gps_altitude:.1f}",
            "" if m.altimeter_height is None else f"{m.altimeter_height:.1f}",
        )
        for m in measurements
    )
    write_rows(path, MEASUREMENT_HEADERS, rows)
