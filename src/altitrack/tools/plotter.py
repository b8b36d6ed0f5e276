"""
Render a finished session's altitude profile to an image file.

GPS altitude is drawn over the sample index; barometer altitude is drawn
on the same axes for the samples that have one. Uses Matplotlib's Agg
canvas directly so no GUI backend is needed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from ..core.models import Measurement
from ..core.presentation import altitude_series, barometer_series


def plot_altitude_profile(
    measurements: Sequence[Measurement],
    path: Path,
    *,
    title: str = "Altitude profile",
) -> Path:
    """Write the altitude plot to ``path`` (format from the suffix) and return it."""
    if not measurements:
        raise ValueError("No measurements to plot")

    x, gps = altitude_series(measurements)
    baro_x, baro = barometer_series(measurements)

    fig = Figure(figsize=(8, 4))
    FigureCanvasAgg(fig)
    ax = fig.add_subplot(111)
    ax.plot(x, gps, label="GPS altitude (m)", linewidth=2)
    if baro.size:
        ax.plot(baro_x, baro, label="Barometer altitude (m)", linestyle="--")
    ax.set_xlabel("Sample")
    ax.set_ylabel("Altitude (m)")
    ax.set_title(title)
    values = np.concatenate([gps, baro])
    low = float(np.nanmin(values)) - 5.0
    high = float(np.nanmax(values)) + 5.0
    ax.set_ylim(low, high)
    ax.grid(True)
    ax.legend(loc="best")
    fig.tight_layout()

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    return path
