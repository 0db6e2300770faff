import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.errors import SourceError
from core.event_hub import DASHBOARD_UPDATE, EventHub, event_hub as default_event_hub
from core.sources.base import ParameterSource
from core.state_store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0  # seconds


class SchedulerState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class SchedulerStats:
    ticks_fired: int = 0
    ticks_skipped: int = 0
    samples_ok: int = 0
    samples_failed: int = 0
    consecutive_failures: int = 0
    last_success_time: Optional[float] = None


class PollingScheduler:
    """
    Drives a ParameterSource on a fixed interval and feeds the StateStore.

    - start() fires a tick immediately, then one every `interval` seconds.
    - A tick is dropped while the previous sample of the same run is in flight.
    - A failing source marks the store ERROR; polling carries on.
    - stop() ends the run. Results of samples issued before stop() are
      discarded when they arrive, so no state mutation happens after stop().
    """

    def __init__(
        self,
        source: ParameterSource,
        store: StateStore,
        interval: float = DEFAULT_POLL_INTERVAL,
        hub: Optional[EventHub] = None,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.source = source
        self.store = store
        self.interval = interval
        self.stats = SchedulerStats()
        self._hub = hub or default_event_hub
        self._state = SchedulerState.STOPPED
        # Bumped on every start/stop; a sample only applies if its run is still current
        self._generation = 0
        self._timer_task: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    def start(self):
        """Start polling. Must be called with a running event loop. No-op if already running."""
        if self.is_running:
            logger.debug("PollingScheduler already running, ignoring start()")
            return
        loop = asyncio.get_running_loop()
        self._generation += 1
        self._state = SchedulerState.RUNNING
        generation = self._generation
        self._tick(generation)
        self._timer_task = loop.create_task(self._run(generation))
        logger.info(f"PollingScheduler started (source: {self.source.name}, interval: {self.interval}s)")

    def stop(self, cancel_in_flight: bool = False):
        """
        Stop polling. Any sample still in flight is left to finish and its
        result dropped, unless cancel_in_flight is set.
        """
        if not self.is_running:
            return
        self._generation += 1
        self._state = SchedulerState.STOPPED
        if self._timer_task:
            self._timer_task.cancel()
            self._timer_task = None
        if self._in_flight and not self._in_flight.done() and cancel_in_flight:
            self._in_flight.cancel()
        self._in_flight = None
        logger.info("PollingScheduler stopped")

    async def _run(self, generation: int):
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval
        while self._generation == generation:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            if self._generation != generation:
                break
            self._tick(generation)
            next_tick += self.interval

    def _tick(self, generation: int):
        if self._in_flight is not None and not self._in_flight.done():
            self.stats.ticks_skipped += 1
            logger.debug("Previous sample still in flight, skipping tick")
            return
        self.stats.ticks_fired += 1
        self._in_flight = asyncio.get_running_loop().create_task(self._sample(generation))

    async def _sample(self, generation: int):
        try:
            readings = await self.source.sample()
            if not self._is_current(generation):
                return
            self.store.update(readings)
        except asyncio.CancelledError:
            raise
        except SourceError as e:
            if self._is_current(generation):
                logger.warning(f"Sampling {self.source.name} failed: {e}")
                self._on_failure(str(e))
            return
        except Exception as e:
            # Also covers a source handing back something that is not a batch of readings
            if self._is_current(generation):
                logger.exception(f"Unexpected error while sampling {self.source.name}")
                self._on_failure(f"Unexpected source failure: {e}")
            return

        self.stats.samples_ok += 1
        self.stats.consecutive_failures = 0
        self.stats.last_success_time = time.time()
        self._hub.send_all_on_topic(DASHBOARD_UPDATE, self.store.snapshot())

    def _is_current(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug("Discarding sample result from a stopped run")
            return False
        return True

    def _on_failure(self, message: str):
        self.stats.samples_failed += 1
        self.stats.consecutive_failures += 1
        self.store.mark_error(message)
        self._hub.send_all_on_topic(DASHBOARD_UPDATE, self.store.snapshot())
