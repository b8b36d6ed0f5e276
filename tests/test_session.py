import math

from altitrack.config.app_config import AppConfig, ExportConfig
from altitrack.core.session import SessionController
from altitrack.dataio.exporter import CSV_FILENAME, ExportResult
from altitrack.dataio.file_paths import session_directory
from altitrack.dataio.gpx_reader import read_gpx
from fakes import FakeBarometer, FakeLocationProvider


def _controller(tmp_path, barometer=None, **config_kwargs):
    location = FakeLocationProvider()
    config = AppConfig(output_dir=tmp_path, **config_kwargs)
    controller = SessionController(location, barometer, config=config)
    return controller, location


def _tick_and_resolve(controller, location, lat, lon, alt):
    controller.scheduler.tick()
    location.resolve(lat, lon, alt)


def test_three_ticks_with_late_barometer_reading(tmp_path) -> None:
    barometer = FakeBarometer()
    controller, location = _controller(tmp_path, barometer)
    assert controller.start()

    for i in range(3):
        if i == 2:
            barometer.emit_pressure(1010.0)
        _tick_and_resolve(controller, location, 52.5200 + i * 0.0001, 13.4050, 34.0 + i)

    measurements = controller.measurements()
    assert len(measurements) == 3
    assert measurements[0].altimeter_height is None
    assert measurements[1].altimeter_height is None
    expected = 44330 * (1 - (1010.0 / 1013.25) ** 0.1903)
    assert math.isclose(measurements[2].altimeter_height, expected, rel_tol=1e-9)

    result = controller.stop()
    assert result is not None
    points = read_gpx(result.gpx_path)
    assert [p.latitude for p in points] == [m.latitude for m in measurements]
    assert [p.longitude for p in points] == [13.4050] * 3
    text = result.gpx_path.read_text(encoding="utf-8")
    assert text.count("<trkpt ") == 3
    assert [line.strip() for line in text.splitlines() if "<ele>" in line] == [
        "<ele>34.0</ele>",
        "<ele>35.0</ele>",
        "<ele>36.0</ele>",
    ]
    assert controller.state.status == f"GPX file saved: {result.gpx_path}"


def test_unsupported_barometer_still_exports(tmp_path) -> None:
    barometer = FakeBarometer(available=False)
    controller, location = _controller(tmp_path, barometer)
    controller.start()

    for i in range(4):
        _tick_and_resolve(controller, location, 48.1 + i, 11.5, 520.0)

    assert barometer.start_calls == 0
    assert all(m.altimeter_height is None for m in controller.measurements())
    result = controller.stop()
    assert result is not None
    assert len(read_gpx(result.gpx_path)) == 4


def test_failed_and_pending_fetches_produce_no_measurement(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    controller.start()

    controller.scheduler.tick()
    location.fail("timeout")
    controller.scheduler.tick()  # still pending when the next tick fires
    _tick_and_resolve(controller, location, 1.0, 2.0, 3.0)

    assert controller.scheduler.tick_count == 3
    assert location.requests == 3
    assert len(controller.measurements()) == 1
    assert controller.is_tracking


def test_failed_fetch_only_updates_status(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    controller.start()

    controller.scheduler.tick()
    location.fail("gps offline")

    assert controller.state.status == "Error: gps offline"
    assert controller.is_tracking
    assert controller.measurements() == ()


def test_latest_position_is_last_writer(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    controller.start()

    controller.scheduler.tick()
    controller.scheduler.tick()
    location.resolve(10.0, 10.0, 1.0)
    location.resolve(20.0, 20.0, 2.0)

    assert controller.state.latest_position.latitude == 20.0
    assert [m.latitude for m in controller.measurements()] == [10.0, 20.0]


def test_double_start_is_a_no_op(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    assert controller.start()
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)

    assert controller.start() is False
    assert len(controller.measurements()) == 1


def test_stop_when_idle_does_nothing(tmp_path) -> None:
    controller, _ = _controller(tmp_path)

    assert controller.stop() is None
    assert controller.state.status == "Ready"
    assert list(tmp_path.iterdir()) == []


def test_stop_without_measurements_writes_nothing(tmp_path) -> None:
    controller, _ = _controller(tmp_path)
    controller.start()

    assert controller.stop() is None
    assert controller.state.status == "Tracking stopped"
    assert list(tmp_path.iterdir()) == []


def test_stop_cancels_timer_and_barometer(tmp_path) -> None:
    barometer = FakeBarometer()
    controller, location = _controller(tmp_path, barometer)
    controller.start()
    assert controller.scheduler.is_active()
    assert barometer.is_active

    controller.stop()

    assert not controller.scheduler.is_active()
    assert not barometer.is_active
    assert barometer.stop_calls == 1


def test_fix_after_stop_is_not_recorded(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    controller.start()
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)
    controller.scheduler.tick()

    result = controller.stop()
    location.resolve(2.0, 2.0, 2.0)

    assert len(controller.measurements()) == 1
    assert len(read_gpx(result.gpx_path)) == 1


def test_restart_clears_previous_session(tmp_path) -> None:
    barometer = FakeBarometer()
    controller, location = _controller(tmp_path, barometer)
    controller.start()
    barometer.emit_pressure(1000.0)
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)
    controller.stop()

    controller.start()
    _tick_and_resolve(controller, location, 2.0, 2.0, 2.0)

    measurements = controller.measurements()
    assert len(measurements) == 1
    assert measurements[0].latitude == 2.0
    assert measurements[0].altimeter_height is None


def test_export_error_is_reported_in_status(tmp_path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    location = FakeLocationProvider()
    controller = SessionController(location, config=AppConfig(output_dir=blocker))
    controller.start()
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)

    assert controller.stop() is None
    assert controller.state.status.startswith("Error saving GPX file:")
    assert not controller.is_tracking


def test_companion_failure_is_reported_in_status(tmp_path) -> None:
    controller, location = _controller(tmp_path, export=ExportConfig(write_csv=True))
    controller.start()
    # A directory in place of the CSV file makes the companion write fail.
    (session_directory(tmp_path, controller.state.started_at) / CSV_FILENAME).mkdir(parents=True)
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)

    result = controller.stop()

    assert result is not None
    assert result.gpx_path.is_file()
    assert result.csv_path is None
    assert result.errors and result.errors[0].startswith("CSV:")
    assert controller.state.status.startswith(f"GPX file saved: {result.gpx_path}")
    assert result.errors[0] in controller.state.status


def test_barometer_error_keeps_tracking(tmp_path) -> None:
    barometer = FakeBarometer()
    controller, _ = _controller(tmp_path, barometer)
    controller.start()

    barometer.emit_error("sensor unplugged")

    assert controller.state.status == "Barometer error: sensor unplugged"
    assert controller.is_tracking


def test_barometer_disabled_by_config(tmp_path) -> None:
    barometer = FakeBarometer()
    controller, _ = _controller(tmp_path, barometer, barometer_enabled=False)
    controller.start()

    assert barometer.start_calls == 0
    assert not controller.altimeter.is_subscribed


def test_close_while_tracking_releases_everything(tmp_path) -> None:
    barometer = FakeBarometer()
    location = FakeLocationProvider()
    with SessionController(location, barometer, config=AppConfig(output_dir=tmp_path)) as controller:
        controller.start()
        controller.scheduler.tick()

    assert not controller.scheduler.is_active()
    assert not barometer.is_active
    location.resolve(1.0, 1.0, 1.0)
    assert controller.measurements() == ()
    assert list(tmp_path.iterdir()) == []


def test_signals_report_lifecycle(tmp_path) -> None:
    controller, location = _controller(tmp_path)
    tracking = []
    added = []
    exported = []
    controller.tracking_changed.connect(tracking.append)
    controller.measurement_added.connect(added.append)
    controller.export_finished.connect(exported.append)

    controller.start()
    _tick_and_resolve(controller, location, 1.0, 1.0, 1.0)
    result = controller.stop()

    assert tracking == [True, False]
    assert len(added) == 1
    assert exported == [result]
    assert isinstance(exported[0], ExportResult)
