"""Helpers for constructing export file paths."""

from datetime import datetime
from pathlib import Path

SESSION_DIR_PREFIX = "Tracking_"
GPX_FILE_PREFIX = "tracking_data_"


def epoch_millis(moment: datetime) -> int:
    return int(round(moment.timestamp() * 1000.0))


def session_directory(base: Path, started_at: datetime) -> Path:
    """
    Directory for one session's export, named after its start instant.

    Example: "Tracking_1717243200123"
    """
    return Path(base) / f"{SESSION_DIR_PREFIX}{epoch_millis(started_at)}"


def filesystem_timestamp(moment: datetime) -> str:
    """Local ISO-8601 timestamp with ':' replaced so it is a valid file name."""
    local = moment.astimezone() if moment.tzinfo is not None else moment
    return local.replace(tzinfo=None).isoformat(timespec="milliseconds").replace(":", "-")


def gpx_filename(exported_at: datetime) -> str:
    """Example: "tracking_data_2024-06-01T14-00-00.123.gpx" """
    return f"{GPX_FILE_PREFIX}{filesystem_timestamp(exported_at)}.gpx"
