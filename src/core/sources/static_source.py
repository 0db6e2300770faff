import time
from typing import Callable, Dict, List, Mapping

from core.models.parameter_enum import ParameterName
from core.models.parameter_reading import ParameterReading
from core.sources.base import ParameterSource


class StaticParameterSource(ParameterSource):
    """Returns the same values at every sample, stamped with the current time."""

    name = "static"

    def __init__(self, values: Mapping[ParameterName, float], clock: Callable[[], float] = time.time):
        self.values: Dict[ParameterName, float] = dict(values)
        self._clock = clock

    async def sample(self) -> List[ParameterReading]:
        now = self._clock()
        return [ParameterReading(name, float(value), now) for name, value in self.values.items()]
