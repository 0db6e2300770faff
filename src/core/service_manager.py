# External libs
import logging
from typing import Optional

# Internal libs
from core.alert_monitor import AlertMonitor
from core.config_loader import config_loader
from core.models.config_data import SOURCE_EMULATED, DashboardConfig
from core.models.dashboard_state import DashboardState
from core.polling_scheduler import PollingScheduler
from core.sources.base import ParameterSource
from core.sources.emulated_source import EmulatedParameterSource
from core.sources.static_source import StaticParameterSource
from core.state_store import StateStore

logger = logging.getLogger(__name__)


def build_source(config: DashboardConfig) -> ParameterSource:
    """Create the ParameterSource named by the configuration."""
    if config.source == SOURCE_EMULATED:
        return EmulatedParameterSource(config.baselines)
    return StaticParameterSource(config.baselines)


class ServiceManager:
    """Owns the dashboard lifecycle: one store, one scheduler and one alert monitor per mount."""

    def __init__(self):
        self.config: Optional[DashboardConfig] = None
        self.store: Optional[StateStore] = None
        self.scheduler: Optional[PollingScheduler] = None
        self.alert_monitor: Optional[AlertMonitor] = None
        self.running = False

    async def start_services(self, config: Optional[DashboardConfig] = None, source: Optional[ParameterSource] = None):
        """Start background services if not already started.
        Args:
            config: Validated configuration. Loaded from the config file when omitted;
                raises ConfigError before anything is started if it is invalid.
            source: ParameterSource to poll. Built from `config.source` when omitted.
        """
        if self.running:
            logger.debug("Services already running")
            return

        config = config or config_loader.get_config()
        logger.info("Starting background services...")

        self.config = config
        self.store = StateStore(config.thresholds.keys())
        self.alert_monitor = AlertMonitor(config.thresholds)
        self.alert_monitor.attach()
        self.scheduler = PollingScheduler(
            source or build_source(config),
            self.store,
            interval=config.poll_interval,
        )
        self.scheduler.start()
        self.running = True

        logger.info("Background services started.")

    def stop_services(self):
        """Stop background services and discard the dashboard state."""
        if not self.running:
            return
        self.running = False

        if self.scheduler:
            self.scheduler.stop(cancel_in_flight=True)
        if self.alert_monitor:
            self.alert_monitor.detach()

        self.scheduler = None
        self.alert_monitor = None
        self.store = None
        self.config = None
        logger.info("Background services stopped.")

    def snapshot(self) -> Optional[DashboardState]:
        if self.store is None:
            return None
        return self.store.snapshot()


service_manager = ServiceManager()
