"""Barometric altitude estimate."""

from __future__ import annotations

import math

from ..config.sampling import SEA_LEVEL_PRESSURE_HPA

# International barometric formula constants.
_SCALE_M = 44330.0
_EXPONENT = 0.1903


def pressure_to_altitude(
    pressure_hpa: float,
    sea_level_pressure_hpa: float = SEA_LEVEL_PRESSURE_HPA,
) -> float:
    """
    Return the altitude in metres above the ``sea_level_pressure_hpa`` level.

    Non-positive pressures are not rejected; the result is then NaN.
    """
    try:
        scaled = (float(pressure_hpa) / float(sea_level_pressure_hpa)) ** _EXPONENT
    except ZeroDivisionError:
        return math.nan
    # A negative ratio raised to a fractional power is complex in Python 3.
    if isinstance(scaled, complex):
        return math.nan
    return _SCALE_M * (1.0 - scaled)
