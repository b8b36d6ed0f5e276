"""Start/stop lifecycle of a tracking session.

``SessionController`` owns the measurement log, the sampling scheduler and the
barometer subscription. A UI (or the headless runner) calls :meth:`start` and
:meth:`stop` and renders :attr:`state`, :meth:`measurements` and the signals.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from PySide6.QtCore import QObject, Signal, Slot

from ..config.app_config import AppConfig
from ..dataio.exporter import ExportResult, GpxExporter
from ..sensors.barometer import BarometerStream, NullBarometerStream
from .altimeter import BarometricAltimeter
from .measurement_log import MeasurementLog
from .models import Measurement, PositionFix, SessionState, local_now
from .scheduler import SamplingScheduler

if TYPE_CHECKING:
    from ..sensors.location import LocationProvider

logger = logging.getLogger(__name__)


class SessionController(QObject):
    """Non-visual controller for one Idle -> Tracking -> Idle cycle at a time."""

    status_changed = Signal(str)
    tracking_changed = Signal(bool)
    measurement_added = Signal(object)  # Measurement
    export_finished = Signal(object)  # ExportResult

    def __init__(
        self,
        location: "LocationProvider",
        barometer: BarometerStream | None = None,
        *,
        config: AppConfig | None = None,
        exporter: GpxExporter | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or AppConfig()
        self._location = location
        self._exporter = exporter or GpxExporter(
            self._config.documents_dir(), self._config.export
        )
        self._state = SessionState()
        self._log = MeasurementLog()

        self._scheduler = SamplingScheduler(self._config.sampling.interval_ms(), self)
        self._scheduler.ticked.connect(self._on_tick)

        self._altimeter = BarometricAltimeter(
            barometer if barometer is not None else NullBarometerStream(self),
            self._config.sampling.sea_level_pressure_hpa,
            self,
        )
        self._altimeter.altitude_changed.connect(self._on_altitude)
        self._altimeter.error_reported.connect(self._set_status)

        self._location.fix_ready.connect(self._on_fix)
        self._location.fix_failed.connect(self._on_fix_failed)
        self._location.status_changed.connect(self._on_location_status)
        self._closed = False

    # --------------------------------------------------------------- accessors
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state.is_tracking

    @property
    def scheduler(self) -> SamplingScheduler:
        return self._scheduler

    @property
    def altimeter(self) -> BarometricAltimeter:
        return self._altimeter

    def measurements(self) -> Tuple[Measurement, ...]:
        return self._log.snapshot()

    # --------------------------------------------------------------- start/stop
    def start(self) -> bool:
        """Enter Tracking. Returns False (and does nothing) if already tracking."""
        if self._closed:
            raise RuntimeError("SessionController has been closed")
        if self._state.is_tracking:
            logger.warning("start() ignored: session already tracking")
            return False

        self._state.reset(local_now())
        self._log.clear()
        self._altimeter.reset()
        self._state.is_tracking = True
        self._set_status("Tracking started")
        logger.info(
            "Tracking started at %s (interval %d ms)",
            self._state.started_at,
            self._scheduler.interval_ms,
        )

        if self._config.barometer_enabled:
            self._altimeter.start()
        self._scheduler.start()
        self.tracking_changed.emit(True)
        return True

    def stop(self) -> Optional[ExportResult]:
        """
        Leave Tracking and export the log.

        Returns the export result, or None when idle, when nothing was
        recorded or when writing failed (the status string says which).
        """
        if not self._state.is_tracking:
            logger.debug("stop() ignored: session not tracking")
            return None

        self._release()
        self._set_status("Tracking stopped")
        logger.info("Tracking stopped after %d measurements", len(self._log))
        self.tracking_changed.emit(False)
        return self._export()

    def close(self) -> None:
        """Cancel timer and subscriptions without exporting; safe to call twice."""
        if self._closed:
            return
        was_tracking = self._state.is_tracking
        self._release()
        self._location.fix_ready.disconnect(self._on_fix)
        self._location.fix_failed.disconnect(self._on_fix_failed)
        self._location.status_changed.disconnect(self._on_location_status)
        self._closed = True
        if was_tracking:
            logger.warning("Session closed while tracking; %d measurements discarded", len(self._log))
            self.tracking_changed.emit(False)

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _release(self) -> None:
        self._scheduler.stop()
        self._altimeter.stop()
        self._state.is_tracking = False

    def _export(self) -> Optional[ExportResult]:
        measurements = self._log.snapshot()
        if not measurements:
            return None
        started_at = self._state.started_at or local_now()
        try:
            result = self._exporter.export(measurements, started_at)
        except OSError as exc:
            logger.exception("Failed to save GPX file")
            self._set_status(f"Error saving GPX file: {exc}")
            return None
        if result is None:
            return None
        status = f"GPX file saved: {result.gpx_path}"
        if result.errors:
            for error in result.errors:
                logger.warning("Companion export failed: %s", error)
            status += f" ({'; '.join(result.errors)})"
        self._set_status(status)
        self.export_finished.emit(result)
        return result

    # --------------------------------------------------------------- callbacks
    @Slot(int)
    def _on_tick(self, tick: int) -> None:
        logger.debug("Tick %d: requesting location fix", tick)
        self._location.request_fix()

    @Slot(object)
    def _on_fix(self, fix: PositionFix) -> None:
        if not self._state.is_tracking:
            logger.debug("Ignoring location fix delivered after stop")
            return
        self._state.latest_position = fix
        measurement = Measurement.from_fix(fix, self._state.latest_altitude)
        self._log.append(measurement)
        self._set_status(f"Measurement captured at {measurement.timestamp:%Y-%m-%d %H:%M:%S}")
        self.measurement_added.emit(measurement)

    @Slot(str)
    def _on_fix_failed(self, message: str) -> None:
        if self._state.is_tracking:
            self._set_status(message)

    @Slot(str)
    def _on_location_status(self, message: str) -> None:
        if self._state.is_tracking:
            self._set_status(message)

    @Slot(float)
    def _on_altitude(self, altitude: float) -> None:
        self._state.latest_altitude = altitude

    @Slot(str)
    def _set_status(self, message: str) -> None:
        self._state.status = message
        logger.debug("Status: %s", message)
        self.status_changed.emit(message)
