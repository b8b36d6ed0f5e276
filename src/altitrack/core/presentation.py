"""Display helpers: table rows, chart series and the current-value summary."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from .models import Measurement, SessionState

TABLE_COLUMNS = (
    "Time",
    "Latitude",
    "Longitude",
    "GPS Altitude (m)",
    "Barometer (m)",
)
MISSING = "n/a"


def measurement_rows(measurements: Sequence[Measurement]) -> List[Tuple[str, ...]]:
    """One formatted row per measurement, matching :data:`TABLE_COLUMNS`."""
    rows = []
    for m in measurements:
        rows.append(
            (
                m.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
                f"{m.latitude:.6f}",
                f"{m.longitude:.6f}",
                f"{m.gps_altitude:.1f}",
                MISSING if m.altimeter_height is None else f"{m.altimeter_height:.1f}",
            )
        )
    return rows


def altitude_series(measurements: Sequence[Measurement]) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(sample index, GPS altitude)`` arrays for charting."""
    y = np.fromiter((m.gps_altitude for m in measurements), dtype=np.float64)
    x = np.arange(y.size, dtype=np.float64)
    return x, y


def barometer_series(measurements: Sequence[Measurement]) -> Tuple[np.ndarray, np.ndarray]:
    """Like :func:`altitude_series` but only for samples with a barometer altitude."""
    pairs = [
        (float(i), m.altimeter_height)
        for i, m in enumerate(measurements)
        if m.altimeter_height is not None
    ]
    if not pairs:
        return np.empty(0), np.empty(0)
    data = np.asarray(pairs, dtype=np.float64)
    return data[:, 0], data[:, 1]


def format_current(state: SessionState) -> str:
    """Multi-line summary of the newest position, or just the status."""
    pos = state.latest_position
    if pos is None:
        return state.status
    lines = [
        "Current Measurement:",
        f"Latitude: {pos.latitude:.6f}",
        f"Longitude: {pos.longitude:.6f}",
        f"GPS Altitude: {pos.altitude:.1f} m",
    ]
    if state.latest_altitude is not None:
        lines.append(f"Barometer Altitude: {state.latest_altitude:.1f} m")
    lines.append(state.status)
    return "\n".join(lines)
