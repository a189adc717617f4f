"""Threshold configuration data structure."""
from dataclasses import dataclass

from ..collectors.system_models import METRIC_NAMES

DEFAULT_THRESHOLD = 60


@dataclass(frozen=True)
class ThresholdConfig:
    """Warning thresholds per metric; critical is derived by the classifier."""
    cpu: int = DEFAULT_THRESHOLD
    memory: int = DEFAULT_THRESHOLD
    disk: int = DEFAULT_THRESHOLD

    def for_metric(self, name: str) -> int:
        """Get the warning threshold for a metric name."""
        if name not in METRIC_NAMES:
            raise KeyError(name)
        return getattr(self, name)
