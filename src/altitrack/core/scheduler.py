"""Fixed-interval tick source for the sampling pipeline."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Qt, QTimer, Signal, Slot

logger = logging.getLogger(__name__)


class SamplingScheduler(QObject):
    """
    Emit ``ticked(n)`` every ``interval_ms`` while active.

    Ticks are not serialised against the work they trigger: a slow location
    request simply overlaps the next tick.
    """

    ticked = Signal(int)

    def __init__(self, interval_ms: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self.tick)
        self._tick_count = 0

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._tick_count = 0
        self._timer.start()
        logger.debug("Sampling every %d ms", self._timer.interval())

    def stop(self) -> None:
        self._timer.stop()

    @Slot()
    def tick(self) -> None:
        self._tick_count += 1
        self.ticked.emit(self._tick_count)
