"""Dashboard status enumeration and the immutable snapshot handed to readers."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from core.models.parameter_enum import ParameterName
from core.models.parameter_reading import ParameterReading


class DashboardStatus(Enum):
    """Enumeration of all possible dashboard states."""
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class DashboardState:
    """
    Point-in-time copy of the dashboard.

    `readings` holds one entry per parameter sampled so far; a missing key
    means "not yet sampled". `error` is only set while status is ERROR.
    """
    readings: Mapping[ParameterName, ParameterReading] = field(
        default_factory=lambda: MappingProxyType({})
    )
    status: DashboardStatus = DashboardStatus.LOADING
    error: Optional[str] = None

    def reading(self, name: ParameterName) -> Optional[ParameterReading]:
        return self.readings.get(name)
