"""Sampling and export pipeline: measurements, scheduler and session control.

This package sits between the sensor sources in :mod:`altitrack.sensors` and
the file writers in :mod:`altitrack.dataio`.
"""

from .altimeter import BarometricAltimeter
from .altitude import pressure_to_altitude
from .measurement_log import MeasurementLog
from .models import Measurement, PositionFix, SessionState
from .scheduler import SamplingScheduler
from .session import SessionController

__all__ = [
    "BarometricAltimeter",
    "Measurement",
    "MeasurementLog",
    "PositionFix",
    "SamplingScheduler",
    "SessionController",
    "SessionState",
    "pressure_to_altitude",
]
