"""
Parameter reading model.
"""

from dataclasses import dataclass
from core.models.parameter_enum import ParameterName

@dataclass(frozen=True)
class ParameterReading:
    """
    A single timestamped value for one parameter.
    """
    name: ParameterName
    value: float
    timestamp: float
