"""Configuration objects for sampling, export and application paths.

- :mod:`sampling` holds the timer interval and the barometric reference.
- :mod:`app_config` resolves storage paths and loads ``altitrack.yaml``.
"""

from .app_config import AppConfig, AppPaths, ExportConfig, load_config, save_config
from .sampling import SamplingConfig

__all__ = [
    "AppConfig",
    "AppPaths",
    "ExportConfig",
    "SamplingConfig",
    "load_config",
    "save_config",
]
