"""Shared dataclasses for tracking sessions and measurements."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def local_now() -> datetime:
    """Timezone-aware local time, used for capture timestamps."""
    return datetime.now(timezone.utc).astimezone()


@dataclass(frozen=True)
class PositionFix:
    latitude: float
    longitude: float
    altitude: float


@dataclass(frozen=True)
class Measurement:
    """One recorded track point, created once per delivered fix."""

    timestamp: datetime
    latitude: float
    longitude: float
    gps_altitude: float
    # None until the barometer has produced its first reading.
    altimeter_height: Optional[float] = None

    @classmethod
    def from_fix(
        cls,
        fix: PositionFix,
        altimeter_height: Optional[float],
        timestamp: Optional[datetime] = None,
    ) -> "Measurement":
        return cls(
            timestamp=timestamp or local_now(),
            latitude=float(fix.latitude),
            longitude=float(fix.longitude),
            gps_altitude=float(fix.altitude),
            altimeter_height=altimeter_height,
        )


@dataclass
class SessionState:
    """
    Mutable state of the active session, owned by the SessionController.

    The UI reads this by reference; only the controller writes to it.
    """

    is_tracking: bool = False
    latest_position: Optional[PositionFix] = None
    latest_altitude: Optional[float] = None
    status: str = "Ready"
    started_at: Optional[datetime] = None

    def reset(self, started_at: datetime) -> None:
        self.is_tracking = False
        self.latest_position = None
        self.latest_altitude = None
        self.status = "Ready"
        self.started_at = started_at
