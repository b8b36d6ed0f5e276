"""Append-only, ordered store of the active session's measurements."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from .models import Measurement


class MeasurementLog:
    """
    Measurements in capture order.

    Owned and mutated from the Qt main thread only, so a plain list is
    sufficient. Readers get an immutable snapshot.
    """

    def __init__(self) -> None:
        self._items: List[Measurement] = []

    def append(self, measurement: Measurement) -> None:
        if not isinstance(measurement, Measurement):
            raise TypeError(f"Expected Measurement, got {type(measurement).__name__}")
        self._items.append(measurement)

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> Tuple[Measurement, ...]:
        return tuple(self._items)

    def last(self) -> Measurement | None:
        return self._items[-1] if self._items else None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self.snapshot())

    def __bool__(self) -> bool:
        return bool(self._items)
