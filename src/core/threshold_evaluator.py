"""Alert derivation. Stateless; re-evaluated from the latest snapshot on every read."""
from typing import Dict

from core.models.dashboard_state import DashboardState
from core.models.parameter_enum import ParameterName
from core.models.threshold_config import ThresholdConfig


def is_alert(name: ParameterName, value: float, config: ThresholdConfig) -> bool:
    """True when value is strictly above the configured threshold."""
    return value > config[name].threshold


def evaluate_alerts(state: DashboardState, config: ThresholdConfig) -> Dict[ParameterName, bool]:
    """Alert flag for every parameter in `config`; unsampled parameters are never in alert."""
    alerts: Dict[ParameterName, bool] = {}
    for name in config:
        reading = state.readings.get(name)
        alerts[name] = reading is not None and is_alert(name, reading.value, config)
    return alerts
