"""
Asynchronous single-shot position sources.

Every call to :meth:`LocationProvider.request_fix` walks the same steps:

  1. check that a positioning service exists and is enabled,
  2. check (and if needed request) location permission,
  3. start an asynchronous position request.

The outcome is delivered later through exactly one of ``fix_ready`` or
``fix_failed``. Progress messages go through ``status_changed``.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from enum import Enum
from typing import Callable, Deque, Iterable, Optional

from PySide6 import QtCore
from PySide6.QtCore import QCoreApplication, QObject, Qt, QTimer, Signal, Slot
from PySide6.QtPositioning import QGeoPositionInfo, QGeoPositionInfoSource

from ..core.models import PositionFix

logger = logging.getLogger(__name__)

STATUS_REQUESTING_PERMISSION = "Requesting permission..."
STATUS_SERVICE_DISABLED = "Location services are disabled."
STATUS_NO_PERMISSION = "No location permission."
STATUS_ACQUIRING = "Acquiring position..."
STATUS_UPDATED = "Location updated"


class PermissionStatus(Enum):
    GRANTED = "granted"
    DENIED = "denied"
    DENIED_FOREVER = "denied_forever"


class LocationProvider(QObject):
    """Base class for position sources used by the sampling pipeline."""

    fix_ready = Signal(object)  # PositionFix
    fix_failed = Signal(str)
    status_changed = Signal(str)

    # ------------------------------------------------------------------ hooks
    def service_enabled(self) -> bool:
        return True

    def check_permission(self) -> PermissionStatus:
        return PermissionStatus.GRANTED

    def request_permission(self, callback: Callable[[PermissionStatus], None]) -> None:
        """Ask the platform for permission, then call ``callback`` with the outcome."""
        callback(self.check_permission())

    def _request_position(self) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    # ------------------------------------------------------------------ flow
    @Slot()
    def request_fix(self) -> None:
        self._emit_status(STATUS_REQUESTING_PERMISSION)
        if not self.service_enabled():
            self._fail(STATUS_SERVICE_DISABLED)
            return
        permission = self.check_permission()
        if permission is PermissionStatus.DENIED:
            self.request_permission(self._continue_with_permission)
            return
        self._continue_with_permission(permission)

    def _continue_with_permission(self, permission: PermissionStatus) -> None:
        if permission is not PermissionStatus.GRANTED:
            self._fail(STATUS_NO_PERMISSION)
            return
        self._emit_status(STATUS_ACQUIRING)
        try:
            self._request_position()
        except Exception as exc:
            self.report_error(exc)

    def deliver_fix(self, fix: PositionFix) -> None:
        """Report a successful fix to listeners."""
        self._emit_status(STATUS_UPDATED)
        self.fix_ready.emit(fix)

    def report_error(self, error: object) -> None:
        """Report a failed fetch; the next tick retries."""
        self._fail(f"Error: {error}")

    def _fail(self, message: str) -> None:
        logger.warning("Location fix failed: %s", message)
        self.fix_failed.emit(message)

    def _emit_status(self, message: str) -> None:
        logger.debug("Location status: %s", message)
        self.status_changed.emit(message)


_SOURCE_ERRORS = {
    QGeoPositionInfoSource.Error.AccessError: "access to the positioning source was denied",
    QGeoPositionInfoSource.Error.ClosedError: "the positioning source was closed",
    QGeoPositionInfoSource.Error.UnknownSourceError: "unknown positioning source error",
    QGeoPositionInfoSource.Error.UpdateTimeoutError: "no position received before the timeout",
}


def _fix_from_info(info: QGeoPositionInfo) -> PositionFix:
    coordinate = info.coordinate()
    altitude = coordinate.altitude()
    # 2D fixes report NaN altitude; track points carry 0.0 instead.
    if math.isnan(altitude):
        altitude = 0.0
    return PositionFix(
        latitude=coordinate.latitude(),
        longitude=coordinate.longitude(),
        altitude=altitude,
    )


class QtLocationProvider(LocationProvider):
    """Position fixes from the platform's default Qt Positioning source."""

    def __init__(
        self,
        source: QGeoPositionInfoSource | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if source is None:
            source = QGeoPositionInfoSource.createDefaultSource(self)
        self._source: Optional[QGeoPositionInfoSource] = source
        self._permission = self._build_permission()
        if self._source is not None:
            self._source.setPreferredPositioningMethods(
                QGeoPositionInfoSource.PositioningMethod.AllPositioningMethods
            )
            self._source.positionUpdated.connect(self._on_position_updated)
            self._source.errorOccurred.connect(self._on_source_error)
            logger.info("Using positioning source %s", self._source.sourceName())
        else:
            logger.warning("No Qt positioning source available on this platform")

    @staticmethod
    def _build_permission():
        # QLocationPermission only exists on Qt >= 6.5.
        permission_cls = getattr(QtCore, "QLocationPermission", None)
        if permission_cls is None:
            return None
        permission = permission_cls()
        permission.setAccuracy(permission_cls.Accuracy.Precise)
        permission.setAvailability(permission_cls.Availability.WhenInUse)
        return permission

    def service_enabled(self) -> bool:
        if self._source is None:
            return False
        methods = self._source.supportedPositioningMethods()
        return methods != QGeoPositionInfoSource.PositioningMethod.NoPositioningMethods

    def check_permission(self) -> PermissionStatus:
        app = QCoreApplication.instance()
        if self._permission is None or app is None:
            return PermissionStatus.GRANTED
        status = app.checkPermission(self._permission)
        if status == Qt.PermissionStatus.Granted:
            return PermissionStatus.GRANTED
        if status == Qt.PermissionStatus.Undetermined:
            return PermissionStatus.DENIED
        return PermissionStatus.DENIED_FOREVER

    def request_permission(self, callback: Callable[[PermissionStatus], None]) -> None:
        app = QCoreApplication.instance()
        if self._permission is None or app is None:
            callback(PermissionStatus.GRANTED)
            return

        def _on_result(_permission) -> None:
            status = self.check_permission()
            # A second "undetermined" answer means the user dismissed the prompt.
            callback(
                PermissionStatus.GRANTED
                if status is PermissionStatus.GRANTED
                else PermissionStatus.DENIED_FOREVER
            )

        app.requestPermission(self._permission, self, _on_result)

    def _request_position(self) -> None:
        if self._source is None:
            self.report_error("no positioning source available")
            return
        self._source.requestUpdate()

    @Slot(QGeoPositionInfo)
    def _on_position_updated(self, info: QGeoPositionInfo) -> None:
        if not info.isValid():
            self.report_error("invalid position update")
            return
        self.deliver_fix(_fix_from_info(info))

    def _on_source_error(self, error: QGeoPositionInfoSource.Error) -> None:
        if error == QGeoPositionInfoSource.Error.NoError:
            return
        self.report_error(_SOURCE_ERRORS.get(error, str(error)))


class ReplayLocationProvider(LocationProvider):
    """
    Serve fixes from a prerecorded sequence, one per request.

    Fixes are delivered on the next event-loop iteration so callers see the
    same asynchronous behaviour as a real positioning source.
    """

    def __init__(
        self,
        fixes: Iterable[PositionFix],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._pending: Deque[PositionFix] = deque(fixes)

    @classmethod
    def from_track_points(cls, points, parent: QObject | None = None) -> "ReplayLocationProvider":
        fixes = [
            PositionFix(
                latitude=p.latitude,
                longitude=p.longitude,
                altitude=p.elevation if p.elevation is not None else 0.0,
            )
            for p in points
        ]
        return cls(fixes, parent)

    @property
    def remaining(self) -> int:
        return len(self._pending)

    def _request_position(self) -> None:
        QTimer.singleShot(0, self._emit_next)

    @Slot()
    def _emit_next(self) -> None:
        if not self._pending:
            self.report_error("Replay exhausted")
            return
        self.deliver_fix(self._pending.popleft())
