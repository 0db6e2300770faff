import logging
from typing import Dict, FrozenSet, Optional

from core.event_hub import DASHBOARD_UPDATE, EventHub, event_hub as default_event_hub
from core.models.dashboard_state import DashboardState
from core.models.parameter_enum import ParameterName
from core.models.threshold_config import ThresholdConfig
from core.threshold_evaluator import evaluate_alerts

logger = logging.getLogger(__name__)


class AlertMonitor:
    """Listens to dashboard updates and logs when a parameter enters or leaves alert."""

    def __init__(self, config: ThresholdConfig, hub: Optional[EventHub] = None):
        self.config = config
        self._hub = hub or default_event_hub
        self.active: FrozenSet[ParameterName] = frozenset()

    def attach(self):
        self._hub.subscribe(DASHBOARD_UPDATE, self._on_dashboard_update)

    def detach(self):
        self._hub.unsubscribe(DASHBOARD_UPDATE, self._on_dashboard_update)
        self.active = frozenset()

    def _on_dashboard_update(self, topic: str, state: DashboardState):
        alerts: Dict[ParameterName, bool] = evaluate_alerts(state, self.config)
        active = frozenset(name for name, raised in alerts.items() if raised)

        for name in sorted(active - self.active, key=lambda p: p.name):
            entry = self.config[name]
            logger.warning(
                f"⚠ {entry.display_name or name.name} above threshold: "
                f"{state.readings[name].value} {entry.unit} > {entry.threshold} {entry.unit}"
            )
        for name in sorted(self.active - active, key=lambda p: p.name):
            logger.info(f"✓ {self.config[name].display_name or name.name} back within threshold")

        self.active = active
