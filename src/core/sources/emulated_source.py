import math
import random
import time
from typing import Callable, Dict, List, Mapping, Optional

from core.models.parameter_enum import ParameterName
from core.models.parameter_reading import ParameterReading
from core.sources.base import ParameterSource

# Per-parameter phase offsets so the curves do not move in lockstep
PHASE_OFFSETS: Dict[ParameterName, float] = {
    ParameterName.MOISTURE: 0.0,
    ParameterName.TEMPERATURE: 2.0,
    ParameterName.HUMIDITY: 4.0,
}


class EmulatedParameterSource(ParameterSource):
    """
    Emulates a sensor network: slow sine drift plus uniform noise around each baseline.
    """

    name = "emulated"

    def __init__(
        self,
        baselines: Mapping[ParameterName, float],
        amplitude: float = 10.0,
        period: float = 120.0,
        noise: float = 0.5,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.baselines: Dict[ParameterName, float] = dict(baselines)
        self.amplitude = amplitude
        self.period = period
        self.noise = noise
        self._clock = clock
        self._rng = rng or random.Random()
        self._start_time = clock()

    async def sample(self) -> List[ParameterReading]:
        now = self._clock()
        elapsed = now - self._start_time
        readings = []
        for name, baseline in self.baselines.items():
            angle = 2 * math.pi * elapsed / self.period + PHASE_OFFSETS.get(name, 0.0)
            value = baseline + self.amplitude * math.sin(angle) + self._rng.uniform(-self.noise, self.noise)
            readings.append(ParameterReading(name, round(value, 2), now))
        return readings
