from dataclasses import dataclass, field
from typing import Dict

from core.models.parameter_enum import ParameterName
from core.models.threshold_config import DEFAULT_BASELINES, DEFAULT_THRESHOLDS, ThresholdConfig

SOURCE_STATIC = "static"
SOURCE_EMULATED = "emulated"
SOURCE_KINDS = (SOURCE_STATIC, SOURCE_EMULATED)


@dataclass(frozen=True)
class DashboardConfig:
    thresholds: ThresholdConfig = field(default_factory=lambda: ThresholdConfig(DEFAULT_THRESHOLDS))
    baselines: Dict[ParameterName, float] = field(default_factory=lambda: dict(DEFAULT_BASELINES))
    source: str = SOURCE_STATIC
    poll_interval: float = 5.0
