import yaml
from pathlib import Path
from typing import Any, Dict

from rollstats.core.domain.params.source_params import SourceParams
from rollstats.core.domain.params.window_params import WindowParams


DEFAULT_REPORT_INTERVAL_S = 1.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    def __init__(self, path: str):
        """
        Load YAML configuration from the given path.

        Args:
            path: Path to config.yaml, e.g. 'configs/config.yaml'.
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Config file not found: {self.path}")

        with open(self.path, "r") as f:
            self._data: Dict[str, Any] = yaml.safe_load(f) or {}

    def get(self, key: str, default=None):
        """Get a config value by key."""
        return self._data.get(key, default)

    def window_params(self) -> WindowParams:
        window_props = self._data.get("window", {}) or {}
        return WindowParams.from_dict(window_props)

    def source_params(self) -> SourceParams:
        source_props = self._data.get("source", {}) or {}
        return SourceParams.from_dict(source_props)

    @property
    def report_interval_s(self) -> float:
        interval = self._data.get("report_interval_s", DEFAULT_REPORT_INTERVAL_S)
        if interval <= 0:
            raise ValueError(f"report_interval_s must be positive, got {interval}")
        return float(interval)

    @property
    def log_level(self) -> str:
        level = str(self._data.get("log_level", DEFAULT_LOG_LEVEL)).upper()
        if level not in LOG_LEVELS:
            return DEFAULT_LOG_LEVEL
        return level
