"""Parameter enumeration for type-safe references to monitored quantities."""
from enum import Enum


class ParameterName(Enum):
    """Closed set of environmental parameters shown on the dashboard."""
    MOISTURE = "moisture"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
