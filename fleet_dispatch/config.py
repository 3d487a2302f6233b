"""
Configuration loader for the dispatch runner.
Loads configuration from JSON files in the config folder.
"""

from __future__ import annotations

import json
from pathlib import Path
from dataclasses import dataclass
from typing import Any

# Default config path
CONFIG_DIR = Path(__file__).parent.parent / "config"
CONFIG_FILE = "dispatch.json"

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class OutputConfigData:
    """Output formatting configuration."""
    line_ending: str = "lf"


@dataclass
class LoggingConfigData:
    """Logging configuration."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class EngineConfigData:
    """Engine diagnostics configuration."""
    trace_events: bool = False


class ConfigLoader:
    """Loads configuration from JSON files."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or CONFIG_DIR / CONFIG_FILE
        self._config: dict[str, Any] | None = None

    def load(self) -> dict[str, Any]:
        """Load dispatch configuration from JSON."""
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            # Return defaults
            return {
                "output": {
                    "line_ending": "lf",
                },
                "logging": {
                    "level": "INFO",
                    "format": DEFAULT_LOG_FORMAT,
                },
                "engine": {
                    "trace_events": False,
                },
            }

        with open(self.config_path, 'r') as f:
            self._config = json.load(f)

        return self._config

    def get_output_config(self) -> OutputConfigData:
        """Get output configuration."""
        config = self.load()
        out = config.get("output", {})
        return OutputConfigData(
            line_ending=out.get("line_ending", "lf"),
        )

    def get_logging_config(self) -> LoggingConfigData:
        """Get logging configuration."""
        config = self.load()
        lg = config.get("logging", {})
        return LoggingConfigData(
            level=lg.get("level", "INFO"),
            format=lg.get("format", DEFAULT_LOG_FORMAT),
        )

    def get_engine_config(self) -> EngineConfigData:
        """Get engine configuration."""
        config = self.load()
        eng = config.get("engine", {})
        return EngineConfigData(
            trace_events=eng.get("trace_events", False),
        )


# Global instance
_config_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get the global config loader instance."""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
