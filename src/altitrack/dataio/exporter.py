"""Write a finished session to disk: GPX plus optional CSV and plot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.app_config import ExportConfig
from ..core.models import Measurement, local_now
from ..tools.debug import time_block
from . import csv_writer, file_paths, gpx_writer

logger = logging.getLogger(__name__)

CSV_FILENAME = "measurements.csv"
PLOT_FILENAME = "altitude_profile.png"


@dataclass
class ExportResult:
    directory: Path
    gpx_path: Path
    csv_path: Optional[Path] = None
    plot_path: Optional[Path] = None
    errors: List[str] = field(default_factory=list)


class GpxExporter:
    """
    Serialize measurements into ``<documents>/Tracking_<start ms>/``.

    I/O errors writing the GPX file propagate as :class:`OSError`; failures
    of the optional companion files are collected in
    :attr:`ExportResult.errors` instead.
    """

    def __init__(self, documents_dir: Path, config: ExportConfig | None = None) -> None:
        self.documents_dir = Path(documents_dir)
        self.config = config or ExportConfig()

    def export(
        self,
        measurements: Sequence[Measurement],
        started_at: datetime,
        exported_at: datetime | None = None,
    ) -> Optional[ExportResult]:
        """Return None without touching the filesystem when there is nothing to export."""
        if not measurements:
            logger.info("No measurements recorded; skipping export")
            return None

        exported_at = exported_at or local_now()
        with time_block("gpx serialization"):
            document = gpx_writer.build_gpx(
                measurements,
                creator=self.config.creator,
                track_name=self.config.track_name,
            )

        directory = file_paths.session_directory(self.documents_dir, started_at)
        directory.mkdir(parents=True, exist_ok=True)
        gpx_path = directory / file_paths.gpx_filename(exported_at)
        gpx_writer.write_gpx(gpx_path, document)
        logger.info("Wrote %d track points to %s", len(measurements), gpx_path)

        result = ExportResult(directory=directory, gpx_path=gpx_path)
        if self.config.write_csv:
            self._write_csv(result, measurements)
        if self.config.write_plot:
            self._write_plot(result, measurements)
        return result

    def _write_csv(self, result: ExportResult, measurements: Sequence[Measurement]) -> None:
        path = result.directory / CSV_FILENAME
        try:
            csv_writer.write_measurements(path, measurements)
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            result.errors.append(f"CSV: {exc}")
            return
        result.csv_path = path

    def _write_plot(self, result: ExportResult, measurements: Sequence[Measurement]) -> None:
        # Imported lazily: matplotlib is only needed when plots are requested.
        from ..tools.plotter import plot_altitude_profile

        path = result.directory / PLOT_FILENAME
        try:
            plot_altitude_profile(measurements, path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to write %s: %s", path, exc)
            result.errors.append(f"Plot: {exc}")
            return
        result.plot_path = path
