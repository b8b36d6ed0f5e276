"""Qt event-loop entry point for a headless tracking session.

This module wires up argument parsing and logging, builds the location and
barometer sources, starts a :class:`~altitrack.core.session.SessionController`
and runs the Qt event loop until ``--duration`` expires or the process is
interrupted. Stopping the session writes the GPX export.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Tuple

from PySide6.QtCore import QCoreApplication, QTimer

from ..config.app_config import AppConfig, AppPaths, load_config
from ..core.session import SessionController
from ..dataio.gpx_reader import read_gpx
from ..sensors.barometer import BarometerStream, NullBarometerStream, create_default_barometer
from ..sensors.location import LocationProvider, QtLocationProvider, ReplayLocationProvider

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record position and barometric altitude, export as GPX",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file (default: built-in defaults)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between samples (default: 5)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop and export after this many seconds (default: run until Ctrl+C)",
    )
    parser.add_argument(
        "--replay",
        type=str,
        default=None,
        help="Replay positions from a GPX file instead of the positioning service",
    )
    parser.add_argument(
        "--no-barometer",
        action="store_true",
        help="Do not subscribe to the pressure sensor",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory that receives Tracking_<ms> export folders",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Also write measurements.csv next to the GPX file",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Also write altitude_profile.png next to the GPX file",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging verbosity (default: INFO)",
    )
    return parser


def _parse_cli_args(argv: list[str]) -> Tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def build_config(args: argparse.Namespace) -> AppConfig:
    """Apply command-line overrides on top of the YAML configuration."""
    config = load_config(args.config)
    if args.interval is not None:
        config.sampling.interval_s = float(args.interval)
    if args.no_barometer:
        config.barometer_enabled = False
    if args.output_dir:
        config.output_dir = Path(args.output_dir).expanduser()
    if args.csv:
        config.export.write_csv = True
    if args.plot:
        config.export.write_plot = True
    return config


def build_sources(
    args: argparse.Namespace,
    config: AppConfig,
    app: QCoreApplication,
) -> Tuple[LocationProvider, BarometerStream]:
    if args.replay:
        points = read_gpx(Path(args.replay).expanduser())
        logger.info("Replaying %d positions from %s", len(points), args.replay)
        location: LocationProvider = ReplayLocationProvider.from_track_points(points, app)
    else:
        location = QtLocationProvider(parent=app)

    if config.barometer_enabled:
        barometer = create_default_barometer(app)
    else:
        barometer = NullBarometerStream(app)
    return location, barometer


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "altitrack.log"


def configure_logging(level: str, paths: AppPaths) -> logging.FileHandler:
    """Log to stderr and append the same records to the log directory."""
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
    paths.logs.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(paths.logs / LOG_FILENAME, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    paths = AppPaths()
    handler = configure_logging(args.log_level, paths)
    logger.info("Logging to %s", handler.baseFilename)

    app = QCoreApplication.instance() or QCoreApplication(qt_argv)
    app.setApplicationName("altitrack")

    config = build_config(args)
    if config.output_dir is None:
        paths.ensure()
    location, barometer = build_sources(args, config, app)
    controller = SessionController(location, barometer, config=config, parent=app)

    def _finish(*_: object) -> None:
        if controller.is_tracking:
            controller.stop()
        app.quit()

    controller.status_changed.connect(lambda message: print(message, flush=True))
    app.aboutToQuit.connect(controller.close)

    # Python signal handlers only run while the interpreter holds control;
    # a periodic no-op timer hands it back regularly.
    signal.signal(signal.SIGINT, _finish)
    signal.signal(signal.SIGTERM, _finish)
    wakeup = QTimer(app)
    wakeup.timeout.connect(lambda: None)
    wakeup.start(200)

    if args.duration is not None:
        QTimer.singleShot(int(max(0.0, args.duration) * 1000.0), _finish)

    controller.start()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()
