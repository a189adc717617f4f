"""System data models for system collector."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

METRIC_NAMES = ("cpu", "memory", "disk")


@dataclass(frozen=True)
class Metric:
    """A single named resource measurement."""
    name: str  # "cpu", "memory", "disk"
    value: int  # percent


@dataclass(frozen=True)
class SystemMetrics:
    cpu_percent: int
    memory_percent: int
    disk_percent: int
    timestamp: datetime = field(default_factory=datetime.now)

    def value_of(self, name: str) -> int:
        """Get the percentage for a metric name."""
        if name not in METRIC_NAMES:
            raise KeyError(name)
        return getattr(self, f"{name}_percent")

    def as_metrics(self) -> Tuple[Metric, ...]:
        """Return the three readings in cpu, memory, disk order."""
        return tuple(Metric(name, self.value_of(name)) for name in METRIC_NAMES)
