from abc import ABC, abstractmethod
from typing import Collection

from core.models.parameter_reading import ParameterReading


class ParameterSource(ABC):
    """
    Capability that yields the current parameter values on demand.

    `sample()` returns one reading per parameter it could measure. A subset is
    allowed: parameters left out keep their previous reading in the store.
    Failure must be raised as SourceError, for the whole call. The call may
    take arbitrarily long; the scheduler never waits on it from its timer.
    """

    name: str = "source"

    @abstractmethod
    async def sample(self) -> Collection[ParameterReading]:
        ...
