"""Sampling configuration and helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_INTERVAL_S = 5.0
SEA_LEVEL_PRESSURE_HPA = 1013.25


def _coerce_positive(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return float(fallback)
    if not math.isfinite(number) or number <= 0.0:
        return float(fallback)
    return number


@dataclass
class SamplingConfig:
    """
    Single source of truth for the sampling timer.

    interval_s: seconds between two scheduler ticks.
    sea_level_pressure_hpa: reference pressure for the altitude estimate.
    """

    interval_s: float = DEFAULT_INTERVAL_S
    sea_level_pressure_hpa: float = SEA_LEVEL_PRESSURE_HPA

    def interval_ms(self) -> int:
        """Return the timer interval as a positive integer in milliseconds."""
        seconds = _coerce_positive(self.interval_s, DEFAULT_INTERVAL_S)
        return max(1, int(round(seconds * 1000.0)))

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any] | None,
        *,
        default_interval_s: float = DEFAULT_INTERVAL_S,
    ) -> "SamplingConfig":
        """
        Construct a SamplingConfig from a mapping such as altitrack.yaml.

        Supported shape::

            sampling:
              interval_s: 5
              sea_level_pressure_hpa: 1013.25
        """
        payload: Mapping[str, Any] = mapping or {}

        sampling_block = (
            payload.get("sampling") if isinstance(payload, Mapping) else None
        )

        interval: Any = default_interval_s
        sea_level: Any = SEA_LEVEL_PRESSURE_HPA

        if isinstance(sampling_block, Mapping):
            interval = sampling_block.get("interval_s", interval)
            sea_level = sampling_block.get("sea_level_pressure_hpa", sea_level)

        return cls(
            interval_s=_coerce_positive(interval, default_interval_s),
            sea_level_pressure_hpa=_coerce_positive(sea_level, SEA_LEVEL_PRESSURE_HPA),
        )

    def to_mapping(self) -> dict:
        """Serialize the sampling config back into a mapping suitable for YAML."""
        return {
            "sampling": {
                "interval_s": float(self.interval_s),
                "sea_level_pressure_hpa": float(self.sea_level_pressure_hpa),
            }
        }
