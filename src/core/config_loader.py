import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from core.errors import ConfigError
from core.models.config_data import SOURCE_KINDS, DashboardConfig
from core.models.parameter_enum import ParameterName
from core.models.threshold_config import DEFAULT_BASELINES, ParameterThreshold, ThresholdConfig

logger = logging.getLogger(__name__)


def _number(value: Any, field_name: str) -> float:
    # bool is an int subclass; "threshold": true is a typo, not 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigError(f"{field_name} must be a finite number, got {value!r}")
    return float(value)


def _text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{field_name} must be a non-empty string, got {value!r}")
    return value


def _parameter_name(key: str) -> ParameterName:
    try:
        return ParameterName[key.upper()]
    except (KeyError, AttributeError):
        valid = ", ".join(p.name for p in ParameterName)
        raise ConfigError(f"Unknown parameter {key!r} in configuration. Valid values are: {valid}")


def parse_config(data: Mapping[str, Any]) -> DashboardConfig:
    """Build a DashboardConfig from decoded JSON. Raises ConfigError on anything missing or malformed."""
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration root must be a JSON object")

    parameters = data.get("parameters")
    if not isinstance(parameters, Mapping):
        raise ConfigError("Configuration must contain a 'parameters' object")

    thresholds: Dict[ParameterName, ParameterThreshold] = {}
    baselines: Dict[ParameterName, float] = {}
    for key, entry in parameters.items():
        name = _parameter_name(key)
        if not isinstance(entry, Mapping):
            raise ConfigError(f"{name.name} must be an object")
        if "threshold" not in entry:
            raise ConfigError(f"{name.name}.threshold is missing")
        if "display_name" in entry:
            display_name = _text(entry["display_name"], f"{name.name}.display_name")
        else:
            display_name = name.name.title()
        thresholds[name] = ParameterThreshold(
            threshold=_number(entry["threshold"], f"{name.name}.threshold"),
            unit=_text(entry.get("unit"), f"{name.name}.unit"),
            display_color=_text(entry.get("display_color"), f"{name.name}.display_color"),
            display_name=display_name,
        )
        baseline = entry.get("baseline", DEFAULT_BASELINES[name])
        baselines[name] = _number(baseline, f"{name.name}.baseline")

    source = data.get("source", "static")
    if source not in SOURCE_KINDS:
        raise ConfigError(f"source must be one of {', '.join(SOURCE_KINDS)}, got {source!r}")

    poll_interval = _number(data.get("poll_interval", 5.0), "poll_interval")
    if poll_interval <= 0:
        raise ConfigError(f"poll_interval must be positive, got {poll_interval}")

    return DashboardConfig(
        thresholds=ThresholdConfig(thresholds),
        baselines=baselines,
        source=source,
        poll_interval=poll_interval,
    )


class ConfigLoader:
    """Loads the dashboard configuration (thresholds, source, interval) from a JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self.get_config_path()
        self._config: Optional[DashboardConfig] = None

    @staticmethod
    def get_config_path() -> Path:
        """Default location: <project root>/config/dashboard_config.json."""
        return Path(__file__).parent.parent.parent / "config" / "dashboard_config.json"

    def load_config(self) -> DashboardConfig:
        """Load and validate the file. A missing file falls back to the built-in defaults."""
        if not self.config_path.exists():
            logger.warning(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = DashboardConfig()
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                json_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse configuration file {self.config_path}: {e}") from e
        except (UnicodeDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read configuration file {self.config_path}: {e}") from e

        self._config = parse_config(json_data)
        logger.info(f"Configuration loaded from {self.config_path}")
        return self._config

    def get_config(self) -> DashboardConfig:
        if self._config is None:
            return self.load_config()
        return self._config

    def with_overrides(self, source: Optional[str] = None, poll_interval: Optional[float] = None) -> DashboardConfig:
        """Return the loaded config with environment overrides applied and validated."""
        config = self.get_config()
        if source is not None:
            if source not in SOURCE_KINDS:
                raise ConfigError(f"source must be one of {', '.join(SOURCE_KINDS)}, got {source!r}")
            config = replace(config, source=source)
        if poll_interval is not None:
            if poll_interval <= 0:
                raise ConfigError(f"poll_interval must be positive, got {poll_interval}")
            config = replace(config, poll_interval=float(poll_interval))
        return config


# Global instance
config_loader = ConfigLoader()
