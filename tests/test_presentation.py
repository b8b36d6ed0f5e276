from datetime import datetime, timezone

import numpy as np

from altitrack.core.models import Measurement, PositionFix, SessionState
from altitrack.core.presentation import (
    TABLE_COLUMNS,
    altitude_series,
    barometer_series,
    format_current,
    measurement_rows,
)

STAMP = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _measurements():
    return [
        Measurement(STAMP, 52.1234567, 13.7654321, 34.06, None),
        Measurement(STAMP, 52.2, 13.8, 36.0, 27.14),
    ]


def test_rows_match_columns() -> None:
    rows = measurement_rows(_measurements())

    assert len(rows[0]) == len(TABLE_COLUMNS)
    assert rows[0][1:] == ("52.123457", "13.765432", "34.1", "n/a")
    assert rows[1][4] == "27.1"


def test_series() -> None:
    x, y = altitude_series(_measurements())
    np.testing.assert_array_equal(x, np.array([0.0, 1.0]))
    np.testing.assert_allclose(y, np.array([34.06, 36.0]))

    bx, by = barometer_series(_measurements())
    np.testing.assert_array_equal(bx, np.array([1.0]))
    np.testing.assert_allclose(by, np.array([27.14]))


def test_series_of_empty_log() -> None:
    x, y = altitude_series([])
    assert x.size == 0 and y.size == 0
    bx, by = barometer_series([])
    assert bx.size == 0 and by.size == 0


def test_format_current_without_position_shows_status() -> None:
    assert format_current(SessionState(status="Ready")) == "Ready"


def test_format_current_with_position() -> None:
    state = SessionState(
        latest_position=PositionFix(1.5, 2.25, 100.04),
        latest_altitude=12.345,
        status="Location updated",
    )
    text = format_current(state)

    assert "Latitude: 1.500000" in text
    assert "GPS Altitude: 100.0 m" in text
    assert "Barometer Altitude: 12.3 m" in text
    assert text.endswith("Location updated")
