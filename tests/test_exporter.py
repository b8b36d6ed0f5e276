import csv
from datetime import datetime, timedelta, timezone

import pytest

from altitrack.config.app_config import ExportConfig
from altitrack.core.models import Measurement
from altitrack.dataio.exporter import CSV_FILENAME, PLOT_FILENAME, GpxExporter
from altitrack.dataio.file_paths import epoch_millis

STARTED = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _measurements(count: int = 3):
    return [
        Measurement(
            timestamp=STARTED + timedelta(seconds=5 * (i + 1)),
            latitude=47.0 + i * 0.001,
            longitude=8.0,
            gps_altitude=400.0 + i,
            altimeter_height=None if i == 0 else 12.34,
        )
        for i in range(count)
    ]


def test_empty_log_writes_nothing(tmp_path) -> None:
    exporter = GpxExporter(tmp_path / "docs")

    assert exporter.export([], STARTED) is None
    assert not (tmp_path / "docs").exists()


def test_export_layout(tmp_path) -> None:
    exporter = GpxExporter(tmp_path)
    exported_at = datetime(2024, 6, 1, 12, 0, 30)

    result = exporter.export(_measurements(), STARTED, exported_at=exported_at)

    assert result.directory == tmp_path / f"Tracking_{epoch_millis(STARTED)}"
    assert result.gpx_path.name == "tracking_data_2024-06-01T12-00-30.000.gpx"
    assert result.gpx_path.read_text(encoding="utf-8").count("<trkpt ") == 3
    assert result.csv_path is None
    assert result.plot_path is None
    assert [p.name for p in result.directory.iterdir()] == [result.gpx_path.name]


def test_csv_companion(tmp_path) -> None:
    exporter = GpxExporter(tmp_path, ExportConfig(write_csv=True))

    result = exporter.export(_measurements(), STARTED)

    assert result.csv_path == result.directory / CSV_FILENAME
    with result.csv_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == [
        "timestamp_utc",
        "latitude",
        "longitude",
        "gps_altitude_m",
        "altimeter_height_m",
    ]
    assert rows[1][4] == ""
    assert rows[2][4] == "12.3"
    assert rows[1][0] == "2024-06-01T12:00:05.000Z"


def test_plot_companion(tmp_path) -> None:
    exporter = GpxExporter(tmp_path, ExportConfig(write_plot=True))

    result = exporter.export(_measurements(), STARTED)

    assert result.plot_path == result.directory / PLOT_FILENAME
    assert result.plot_path.stat().st_size > 0
    assert result.errors == []


def test_gpx_write_failure_raises_oserror(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(OSError):
        GpxExporter(blocker).export(_measurements(), STARTED)
