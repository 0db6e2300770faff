import pytest

from core.models.dashboard_state import DashboardStatus
from core.models.parameter_enum import ParameterName
from core.state_store import StateStore
from core.threshold_evaluator import evaluate_alerts, is_alert

from fakes import NOMINAL, readings


@pytest.mark.parametrize("value, expected", [
    (69.9, False),
    (70.0, False),  # at threshold is not an alert
    (70.01, True),
    (71.0, True),
])
def test_is_alert_is_strict(thresholds, value, expected):
    assert is_alert(ParameterName.MOISTURE, value, thresholds) is expected


def test_is_alert_uses_per_parameter_threshold(thresholds):
    assert is_alert(ParameterName.TEMPERATURE, 31.0, thresholds) is True
    assert is_alert(ParameterName.HUMIDITY, 31.0, thresholds) is False


def test_nominal_values_raise_no_alert(thresholds):
    store = StateStore()
    store.update(readings(NOMINAL))
    state = store.snapshot()

    assert state.status == DashboardStatus.READY
    assert evaluate_alerts(state, thresholds) == {
        ParameterName.MOISTURE: False,
        ParameterName.TEMPERATURE: False,
        ParameterName.HUMIDITY: False,
    }


def test_only_high_moisture_alerts(thresholds):
    store = StateStore()
    store.update(readings({**NOMINAL, ParameterName.MOISTURE: 85.0}))
    state = store.snapshot()

    alerts = evaluate_alerts(state, thresholds)
    assert alerts[ParameterName.MOISTURE] is True
    assert alerts[ParameterName.TEMPERATURE] is False
    assert alerts[ParameterName.HUMIDITY] is False
    assert state.reading(ParameterName.TEMPERATURE).value == 25.0
    assert state.reading(ParameterName.HUMIDITY).value == 60.0


def test_unsampled_parameter_is_never_in_alert(thresholds):
    alerts = evaluate_alerts(StateStore().snapshot(), thresholds)
    assert not any(alerts.values())
    assert set(alerts) == set(ParameterName)
