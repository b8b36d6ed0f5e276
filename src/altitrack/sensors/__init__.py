"""Position and pressure sources.

Each source is a ``QObject`` that reports through Qt signals on the thread
that owns it:

- :mod:`location` requests single position fixes (Qt Positioning or replay).
- :mod:`barometer` streams pressure readings (Qt Sensors, platform gated).
"""

from .barometer import (
    BarometerStream,
    NullBarometerStream,
    QtPressureStream,
    create_default_barometer,
)
from .location import (
    LocationProvider,
    PermissionStatus,
    QtLocationProvider,
    ReplayLocationProvider,
)

__all__ = [
    "BarometerStream",
    "LocationProvider",
    "NullBarometerStream",
    "PermissionStatus",
    "QtLocationProvider",
    "QtPressureStream",
    "ReplayLocationProvider",
    "create_default_barometer",
]
