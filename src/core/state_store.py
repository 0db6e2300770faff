import logging
import threading
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Optional

from core.models.dashboard_state import DashboardState, DashboardStatus
from core.models.parameter_enum import ParameterName
from core.models.parameter_reading import ParameterReading

logger = logging.getLogger(__name__)


class StateStore:
    """
    Holds the latest reading per parameter and the dashboard status.

    Single writer (the polling scheduler), many readers. Every mutation and
    every snapshot runs under one lock so readers never see a torn update.
    """

    def __init__(self, parameters: Iterable[ParameterName] = tuple(ParameterName)):
        self.parameters: FrozenSet[ParameterName] = frozenset(parameters)
        self._lock = threading.Lock()
        self._readings: Dict[ParameterName, ParameterReading] = {}
        self._status = DashboardStatus.LOADING
        self._error: Optional[str] = None

    def update(self, readings: Iterable[ParameterReading]) -> bool:
        """
        Apply a set of readings. A reading replaces the stored one only if its
        timestamp is >= the stored timestamp, so replays and out-of-order
        deliveries never regress state. Clears ERROR.

        The batch is checked before anything is applied: if any item is not a
        ParameterReading, TypeError is raised and the store is left untouched.

        Returns True if any stored reading changed.
        """
        batch = list(readings)
        for reading in batch:
            if not isinstance(reading, ParameterReading):
                raise TypeError(f"Expected ParameterReading, got {type(reading).__name__}")

        with self._lock:
            pending = dict(self._readings)
            for reading in batch:
                if reading.name not in self.parameters:
                    logger.warning(f"Ignoring reading for unknown parameter {reading.name}")
                    continue
                current = pending.get(reading.name)
                if current is not None and reading.timestamp < current.timestamp:
                    logger.debug(
                        f"Dropping out-of-order reading for {reading.name.name} "
                        f"(t={reading.timestamp} < {current.timestamp})"
                    )
                    continue
                pending[reading.name] = reading
            changed = pending != self._readings
            self._readings = pending
            self._error = None
            self._status = self._compute_status()
        return changed

    def mark_error(self, message: str):
        """Flag a failed sample. Last known readings stay in place."""
        with self._lock:
            self._status = DashboardStatus.ERROR
            self._error = message

    def snapshot(self) -> DashboardState:
        with self._lock:
            return DashboardState(
                readings=MappingProxyType(dict(self._readings)),
                status=self._status,
                error=self._error,
            )

    @property
    def status(self) -> DashboardStatus:
        with self._lock:
            return self._status

    def _compute_status(self) -> DashboardStatus:
        if self.parameters.issubset(self._readings):
            return DashboardStatus.READY
        return DashboardStatus.LOADING
