"""Static per-parameter alert thresholds and display settings."""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping

from core.errors import ConfigError
from core.models.parameter_enum import ParameterName

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class ParameterThreshold:
    threshold: float
    unit: str
    display_color: str
    display_name: str = ""


class ThresholdConfig(Mapping[ParameterName, ParameterThreshold]):
    """
    Read-only mapping ParameterName -> ParameterThreshold.

    Must cover every ParameterName; raises ConfigError otherwise.
    """

    def __init__(self, thresholds: Mapping[ParameterName, ParameterThreshold]):
        missing = [p.name for p in ParameterName if p not in thresholds]
        if missing:
            raise ConfigError(f"Missing threshold configuration for: {', '.join(missing)}")
        for name, entry in thresholds.items():
            if not isinstance(name, ParameterName):
                raise ConfigError(f"Unknown parameter in threshold configuration: {name!r}")
            if not HEX_COLOR.match(entry.display_color):
                raise ConfigError(
                    f"{name.name}.display_color must be a #rrggbb hex color, got {entry.display_color!r}"
                )
        self._thresholds: Mapping[ParameterName, ParameterThreshold] = MappingProxyType(dict(thresholds))

    def __getitem__(self, name: ParameterName) -> ParameterThreshold:
        return self._thresholds[name]

    def __iter__(self) -> Iterator[ParameterName]:
        return iter(self._thresholds)

    def __len__(self) -> int:
        return len(self._thresholds)

    def __repr__(self) -> str:
        return f"ThresholdConfig({dict(self._thresholds)!r})"


DEFAULT_THRESHOLDS: Dict[ParameterName, ParameterThreshold] = {
    ParameterName.MOISTURE: ParameterThreshold(70.0, "%", "#2e7d32", "Soil Moisture"),
    ParameterName.TEMPERATURE: ParameterThreshold(30.0, "°C", "#1976d2", "Temperature"),
    ParameterName.HUMIDITY: ParameterThreshold(80.0, "%", "#9c27b0", "Humidity"),
}

# Values returned by the stub source until a real sensor backend is plugged in
DEFAULT_BASELINES: Dict[ParameterName, float] = {
    ParameterName.MOISTURE: 65.0,
    ParameterName.TEMPERATURE: 25.0,
    ParameterName.HUMIDITY: 60.0,
}
