"""Default application paths and configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from PySide6.QtCore import QStandardPaths

from .sampling import SamplingConfig

APP_NAME = "altitrack"
DEFAULT_CONFIG_FILE = "altitrack.yaml"


def _default_data_root() -> Path:
    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppDataLocation
    )
    if location:
        root = Path(location)
        # Without an application name Qt returns the bare data directory.
        if root.name.lower() != APP_NAME:
            root = root / APP_NAME
        return root
    return Path.home() / f".{APP_NAME}"


@dataclass
class AppPaths:
    """
    Application-private storage locations.

    ``ALTITRACK_DATA_ROOT`` and ``ALTITRACK_LOG_DIR`` override the platform
    defaults so that tests and alternate installs can store files elsewhere.
    """

    data_root: Path = field(default_factory=_default_data_root)
    documents: Path = field(init=False)
    logs: Path = field(init=False)

    def __post_init__(self) -> None:
        env_data_root = os.environ.get("ALTITRACK_DATA_ROOT")
        if env_data_root:
            self.data_root = Path(env_data_root).expanduser()
        self.data_root = Path(self.data_root)
        self.documents = self.data_root / "documents"

        env_logs_dir = os.environ.get("ALTITRACK_LOG_DIR")
        if env_logs_dir:
            self.logs = Path(env_logs_dir).expanduser()
        else:
            self.logs = self.data_root / "logs"

    def ensure(self) -> None:
        """Create directories if they do not yet exist."""
        for path in (self.data_root, self.documents, self.logs):
            path.mkdir(parents=True, exist_ok=True)


@dataclass
class ExportConfig:
    """Options for what a finished session writes next to its GPX file."""

    creator: str = "TrackingApp"
    track_name: str = "Tracking Data"
    write_csv: bool = False
    write_plot: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "ExportConfig":
        block = mapping.get("export") if isinstance(mapping, Mapping) else None
        if not isinstance(block, Mapping):
            return cls()
        defaults = cls()
        return cls(
            creator=str(block.get("creator") or defaults.creator),
            track_name=str(block.get("track_name") or defaults.track_name),
            write_csv=bool(block.get("write_csv", defaults.write_csv)),
            write_plot=bool(block.get("write_plot", defaults.write_plot)),
        )

    def to_mapping(self) -> dict:
        return {
            "export": {
                "creator": self.creator,
                "track_name": self.track_name,
                "write_csv": bool(self.write_csv),
                "write_plot": bool(self.write_plot),
            }
        }


@dataclass
class AppConfig:
    """In-memory configuration snapshot used by the tracker runtime."""

    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    barometer_enabled: bool = True
    output_dir: Path | None = None

    def documents_dir(self, paths: AppPaths | None = None) -> Path:
        """Return the directory that receives per-session export folders."""
        if self.output_dir is not None:
            return Path(self.output_dir).expanduser()
        return (paths or AppPaths()).documents

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "AppConfig":
        payload: Mapping[str, Any] = mapping if isinstance(mapping, Mapping) else {}
        sensors = payload.get("sensors")
        barometer_enabled = True
        if isinstance(sensors, Mapping):
            barometer_enabled = bool(sensors.get("barometer", True))
        output_dir = payload.get("output_dir")
        return cls(
            sampling=SamplingConfig.from_mapping(payload),
            export=ExportConfig.from_mapping(payload),
            barometer_enabled=barometer_enabled,
            output_dir=Path(str(output_dir)).expanduser() if output_dir else None,
        )

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        data.update(self.sampling.to_mapping())
        data.update(self.export.to_mapping())
        data["sensors"] = {"barometer": bool(self.barometer_enabled)}
        if self.output_dir is not None:
            data["output_dir"] = str(self.output_dir)
        return data


def load_config(path: str | Path | None) -> AppConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`AppConfig`.
    """
    if path is None:
        return AppConfig()
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        return AppConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return AppConfig.from_mapping(raw)


def save_config(path: str | Path, config: AppConfig) -> None:
    """Persist ``config`` as YAML, creating parent directories as needed."""
    cfg_path = Path(path).expanduser()
    if cfg_path.parent and not cfg_path.parent.exists():
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(
            config.to_mapping(),
            fh,
            default_flow_style=False,
            sort_keys=False,
        )
