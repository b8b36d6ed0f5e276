"""Turns a pressure stream into a "latest barometric altitude" value."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from ..config.sampling import SEA_LEVEL_PRESSURE_HPA
from ..sensors.barometer import BarometerStream
from .altitude import pressure_to_altitude

logger = logging.getLogger(__name__)


class BarometricAltimeter(QObject):
    """
    Subscribe to a :class:`BarometerStream` and keep the newest altitude.

    Each reading overwrites the previous value; there is no smoothing. When
    the stream is unavailable :meth:`start` is a no-op and the altitude stays
    ``None``.
    """

    altitude_changed = Signal(float)
    error_reported = Signal(str)

    def __init__(
        self,
        stream: BarometerStream,
        sea_level_pressure_hpa: float = SEA_LEVEL_PRESSURE_HPA,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._stream = stream
        self._sea_level = float(sea_level_pressure_hpa)
        self._latest: Optional[float] = None
        self._subscribed = False

    @property
    def latest_altitude(self) -> Optional[float]:
        return self._latest

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed

    def reset(self) -> None:
        self._latest = None

    def start(self) -> bool:
        if self._subscribed:
            return True
        if not self._stream.is_available():
            logger.info("Barometer not available; altimeter height stays empty")
            return False
        self._stream.reading_received.connect(self._on_reading)
        self._stream.error_occurred.connect(self._on_error)
        self._subscribed = True
        if not self._stream.start():
            self.stop()
            return False
        logger.info("Barometer subscription started")
        return True

    def stop(self) -> None:
        if not self._subscribed:
            return
        self._subscribed = False
        self._stream.reading_received.disconnect(self._on_reading)
        self._stream.error_occurred.disconnect(self._on_error)
        self._stream.stop()
        logger.info("Barometer subscription stopped")

    @Slot(float)
    def _on_reading(self, pressure_hpa: float) -> None:
        altitude = pressure_to_altitude(pressure_hpa, self._sea_level)
        self._latest = altitude
        logger.debug("Pressure %.2f hPa -> %.2f m", pressure_hpa, altitude)
        self.altitude_changed.emit(altitude)

    @Slot(str)
    def _on_error(self, message: str) -> None:
        self.error_reported.emit(f"Barometer error: {message}")
