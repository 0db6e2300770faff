"""Error taxonomy for the polling-and-alerting core."""


class DashboardError(Exception):
    """Base class for dashboard errors."""


class SourceError(DashboardError):
    """Sampling failed. Transient: the scheduler retries on the next tick."""


class ConfigError(DashboardError):
    """Threshold or polling configuration is missing or malformed. Fatal at startup."""
