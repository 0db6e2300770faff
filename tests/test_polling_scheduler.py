"""Polling scheduler lifecycle, drop-if-busy policy and stop semantics."""

import asyncio

import pytest

from core.errors import SourceError
from core.event_hub import DASHBOARD_UPDATE, EventHub
from core.models.dashboard_state import DashboardStatus
from core.models.parameter_enum import ParameterName
from core.polling_scheduler import PollingScheduler, SchedulerState
from core.sources.static_source import StaticParameterSource
from core.state_store import StateStore
from core.threshold_evaluator import evaluate_alerts

from fakes import NOMINAL, GatedSource, MalformedSource, ScriptedSource, readings


def make_scheduler(source, interval=10.0):
    store = StateStore()
    hub = EventHub()
    return PollingScheduler(source, store, interval=interval, hub=hub), store, hub


class TestLifecycle:

    def test_initially_stopped(self):
        scheduler, _, _ = make_scheduler(StaticParameterSource(NOMINAL))
        assert scheduler.state == SchedulerState.STOPPED
        assert scheduler.is_running is False

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            PollingScheduler(StaticParameterSource(NOMINAL), StateStore(), interval=0)

    def test_stop_when_stopped_is_noop(self):
        scheduler, _, _ = make_scheduler(StaticParameterSource(NOMINAL))
        scheduler.stop()
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_samples_immediately_on_start(self, wait_until):
        source = ScriptedSource([NOMINAL])
        scheduler, store, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        assert scheduler.state == SchedulerState.RUNNING
        assert await wait_until(lambda: store.status == DashboardStatus.READY)
        assert source.calls == 1

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_start_while_running_is_noop(self, wait_until):
        source = ScriptedSource([NOMINAL])
        scheduler, _, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        scheduler.start()
        assert await wait_until(lambda: source.calls >= 1)
        await asyncio.sleep(0.05)
        assert source.calls == 1
        assert scheduler.stats.ticks_fired == 1

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_ticks_every_interval(self, wait_until):
        source = ScriptedSource([NOMINAL])
        scheduler, _, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: source.calls >= 4)

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, wait_until):
        source = ScriptedSource([NOMINAL])
        scheduler, store, _ = make_scheduler(source, interval=10.0)

        for expected_calls in (1, 2, 3):
            scheduler.start()
            assert await wait_until(lambda: source.calls == expected_calls)
            scheduler.stop()
            assert scheduler.state == SchedulerState.STOPPED

        assert store.snapshot().reading(ParameterName.MOISTURE).timestamp == 3.0

    @pytest.mark.asyncio
    async def test_no_ticks_after_stop(self, wait_until):
        source = ScriptedSource([NOMINAL])
        scheduler, _, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: source.calls >= 2)
        scheduler.stop()
        calls = source.calls

        await asyncio.sleep(0.1)
        assert source.calls == calls


class TestDropIfBusy:

    @pytest.mark.asyncio
    async def test_tick_skipped_while_sample_in_flight(self, wait_until):
        source = GatedSource()
        scheduler, store, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.ticks_skipped >= 3)
        assert source.calls == 1

        # Releasing the slow sample lets the next tick through
        source.gates[0].set_result(readings(NOMINAL))
        assert await wait_until(lambda: source.calls == 2)
        assert store.status == DashboardStatus.READY

        scheduler.stop(cancel_in_flight=True)


class TestStopDiscardsLateResults:

    @pytest.mark.asyncio
    async def test_no_mutation_after_stop(self, wait_until):
        source = GatedSource()
        scheduler, store, hub = make_scheduler(source, interval=10.0)
        published = []
        hub.subscribe(DASHBOARD_UPDATE, lambda topic, state: published.append(state))

        scheduler.start()
        assert await wait_until(lambda: source.calls == 1)
        before = store.snapshot()

        scheduler.stop()
        source.gates[0].set_result(readings(NOMINAL))
        await asyncio.sleep(0.02)

        after = store.snapshot()
        assert after == before
        assert after.status == DashboardStatus.LOADING
        assert len(after.readings) == 0
        assert published == []
        assert scheduler.stats.samples_ok == 0

    @pytest.mark.asyncio
    async def test_late_failure_after_stop_is_discarded(self, wait_until):
        source = GatedSource()
        scheduler, store, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: source.calls == 1)
        scheduler.stop()
        source.gates[0].set_exception(SourceError("late timeout"))
        await asyncio.sleep(0.02)

        assert store.status == DashboardStatus.LOADING
        assert scheduler.stats.samples_failed == 0

    @pytest.mark.asyncio
    async def test_old_run_result_ignored_after_restart(self, wait_until):
        source = GatedSource()
        scheduler, store, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: source.calls == 1)
        scheduler.stop()
        scheduler.start()
        assert await wait_until(lambda: source.calls == 2)

        source.gates[0].set_result(readings({ParameterName.MOISTURE: 99.0}, timestamp=1.0))
        await asyncio.sleep(0.02)
        assert ParameterName.MOISTURE not in store.snapshot().readings

        source.gates[1].set_result(readings(NOMINAL, timestamp=2.0))
        assert await wait_until(lambda: store.status == DashboardStatus.READY)
        assert store.snapshot().reading(ParameterName.MOISTURE).value == 65.0

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_cancel_in_flight(self, wait_until):
        source = GatedSource()
        scheduler, _, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: source.calls == 1)
        scheduler.stop(cancel_in_flight=True)
        await asyncio.sleep(0)
        assert source.gates[0].cancelled()


class TestFailureHandling:

    @pytest.mark.asyncio
    async def test_source_error_sets_error_and_keeps_polling(self, wait_until):
        source = ScriptedSource([SourceError("sensor bus timeout"), NOMINAL])
        scheduler, store, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.samples_failed == 1)
        assert scheduler.is_running

        assert await wait_until(lambda: store.status == DashboardStatus.READY)
        assert store.snapshot().error is None
        assert scheduler.stats.consecutive_failures == 0

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_error_keeps_last_good_readings(self, wait_until):
        source = ScriptedSource([NOMINAL, SourceError("sensor offline")])
        scheduler, store, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: store.status == DashboardStatus.ERROR)
        scheduler.stop()

        state = store.snapshot()
        assert state.error == "sensor offline"
        assert state.reading(ParameterName.MOISTURE).value == 65.0
        assert len(state.readings) == 3

    @pytest.mark.asyncio
    async def test_persistent_failure_counts_consecutive(self, wait_until):
        source = ScriptedSource([SourceError("down")])
        scheduler, store, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.consecutive_failures >= 3)
        assert store.status == DashboardStatus.ERROR
        assert scheduler.is_running

        scheduler.stop()

    @pytest.mark.asyncio
    async def test_unexpected_exception_treated_as_source_error(self, wait_until):
        source = ScriptedSource([RuntimeError("driver crashed")])
        scheduler, store, _ = make_scheduler(source, interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: store.status == DashboardStatus.ERROR)
        assert "driver crashed" in store.snapshot().error
        assert scheduler.is_running

        scheduler.stop()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, [None], ["moisture=65"]])
    async def test_malformed_sample_marks_error(self, wait_until, payload):
        source = MalformedSource(payload)
        scheduler, store, _ = make_scheduler(source, interval=0.02)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.samples_failed >= 2)
        assert store.status == DashboardStatus.ERROR
        assert store.snapshot().error.startswith("Unexpected source failure")
        assert len(store.snapshot().readings) == 0
        assert scheduler.stats.samples_ok == 0
        assert scheduler.is_running

        scheduler.stop()


class TestScenarios:

    @pytest.mark.asyncio
    async def test_nominal_values_ready_without_alerts(self, thresholds, wait_until):
        scheduler, store, _ = make_scheduler(StaticParameterSource(NOMINAL), interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.samples_ok == 1)
        scheduler.stop()

        state = store.snapshot()
        assert state.status == DashboardStatus.READY
        assert not any(evaluate_alerts(state, thresholds).values())

    @pytest.mark.asyncio
    async def test_high_moisture_alerts_only_moisture(self, thresholds, wait_until):
        values = {**NOMINAL, ParameterName.MOISTURE: 85.0}
        scheduler, store, _ = make_scheduler(StaticParameterSource(values), interval=10.0)

        scheduler.start()
        assert await wait_until(lambda: scheduler.stats.samples_ok == 1)
        scheduler.stop()

        state = store.snapshot()
        alerts = evaluate_alerts(state, thresholds)
        assert alerts == {
            ParameterName.MOISTURE: True,
            ParameterName.TEMPERATURE: False,
            ParameterName.HUMIDITY: False,
        }
        assert state.reading(ParameterName.TEMPERATURE).value == 25.0
        assert state.reading(ParameterName.HUMIDITY).value == 60.0

    @pytest.mark.asyncio
    async def test_publishes_snapshot_on_update(self, wait_until):
        scheduler, _, hub = make_scheduler(StaticParameterSource(NOMINAL), interval=10.0)
        published = []
        hub.subscribe(DASHBOARD_UPDATE, lambda topic, state: published.append(state))

        scheduler.start()
        assert await wait_until(lambda: len(published) == 1)
        scheduler.stop()

        assert published[0].status == DashboardStatus.READY
