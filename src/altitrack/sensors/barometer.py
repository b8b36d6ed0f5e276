"""Pressure reading streams.

Readings are reported in hectopascals. Only some platforms expose a pressure
sensor; elsewhere :class:`NullBarometerStream` stands in and never emits.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtSensors import QPressureSensor

logger = logging.getLogger(__name__)

PASCAL_PER_HECTOPASCAL = 100.0


class BarometerStream(QObject):
    """Base class for subscribable pressure sources."""

    reading_received = Signal(float)  # hPa
    error_occurred = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def is_available(self) -> bool:
        return True

    def start(self) -> bool:
        """Begin emitting readings. Returns False when the sensor is missing."""
        if self._active:
            return True
        if not self.is_available():
            return False
        self._active = self._start()
        return self._active

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._stop()

    def _start(self) -> bool:
        return True

    def _stop(self) -> None:
        pass


class NullBarometerStream(BarometerStream):
    """Stand-in for platforms without a pressure sensor."""

    def is_available(self) -> bool:
        return False


class QtPressureStream(BarometerStream):
    """Pressure readings from the Qt Sensors ``QPressureSensor`` backend."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._sensor = QPressureSensor(self)
        self._sensor.readingChanged.connect(self._on_reading_changed)
        self._sensor.sensorError.connect(self._on_sensor_error)
        self._available = bool(self._sensor.connectToBackend())
        if not self._available:
            logger.info("No pressure sensor backend available")

    def is_available(self) -> bool:
        return self._available

    def _start(self) -> bool:
        started = bool(self._sensor.start())
        if not started:
            logger.warning("Pressure sensor refused to start")
            self.error_occurred.emit("pressure sensor failed to start")
        return started

    def _stop(self) -> None:
        self._sensor.stop()

    @Slot()
    def _on_reading_changed(self) -> None:
        if not self._active:
            return
        reading = self._sensor.reading()
        if reading is None:
            return
        self.reading_received.emit(reading.pressure() / PASCAL_PER_HECTOPASCAL)

    @Slot(int)
    def _on_sensor_error(self, code: int) -> None:
        logger.error("Pressure sensor error %s", code)
        self.error_occurred.emit(f"sensor error {code}")


def create_default_barometer(parent: QObject | None = None) -> BarometerStream:
    """Return the Qt pressure stream when the platform has one, else a no-op stream."""
    stream = QtPressureStream(parent)
    if stream.is_available():
        return stream
    stream.deleteLater()
    return NullBarometerStream(parent)
