"""Pytest configuration and fixtures for test suite."""

import asyncio
import time
from typing import Callable

import pytest

from core.event_hub import event_hub
from core.models.parameter_enum import ParameterName
from core.models.threshold_config import ParameterThreshold, ThresholdConfig
from core.service_manager import service_manager


@pytest.fixture
def thresholds() -> ThresholdConfig:
    return ThresholdConfig({
        ParameterName.MOISTURE: ParameterThreshold(70.0, "%", "#2e7d32", "Soil Moisture"),
        ParameterName.TEMPERATURE: ParameterThreshold(30.0, "°C", "#1976d2", "Temperature"),
        ParameterName.HUMIDITY: ParameterThreshold(80.0, "%", "#9c27b0", "Humidity"),
    })


@pytest.fixture
def wait_until() -> Callable:
    """Poll a predicate on the running loop until it holds or the timeout expires."""
    async def _wait(predicate: Callable[[], bool], timeout: float = 1.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            await asyncio.sleep(0.005)
        return predicate()
    return _wait


@pytest.fixture(autouse=True)
def reset_global_services():
    """Make sure no test leaks running services or subscribers into the next one."""
    yield
    service_manager.stop_services()
    event_hub.unsubscribe_all()
