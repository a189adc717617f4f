"""System metrics collector for CPU, memory and disk."""
import logging
from datetime import datetime
from typing import Callable, Protocol

import psutil

from .system_models import SystemMetrics

logger = logging.getLogger(__name__)


class Collector(Protocol):
    """Anything that can supply one sample of host utilization."""

    def collect(self) -> SystemMetrics:
        ...


class SystemCollector:
    """Collects CPU, memory and disk utilization via psutil."""

    def __init__(self, disk_path: str = "/", cpu_interval: float = 0.1):
        """Initialize the system collector."""
        self.disk_path = disk_path
        self.cpu_interval = cpu_interval

    def collect(self) -> SystemMetrics:
        """Take one sample of all three metrics."""
        return SystemMetrics(
            cpu_percent=self.get_cpu_usage(),
            memory_percent=self.get_memory_usage(),
            disk_percent=self.get_disk_usage(),
            timestamp=datetime.now(),
        )

    def get_cpu_usage(self) -> int:
        """CPU busy percentage over a short sampling interval."""
        return self._read("CPU", lambda: psutil.cpu_percent(interval=self.cpu_interval))

    def get_memory_usage(self) -> int:
        """Used memory percentage."""
        return self._read("memory", lambda: psutil.virtual_memory().percent)

    def get_disk_usage(self) -> int:
        """Used percentage of the filesystem holding disk_path."""
        return self._read("disk", lambda: psutil.disk_usage(self.disk_path).percent)

    def _read(self, label: str, reader: Callable[[], float]) -> int:
        # A reading that cannot be taken counts as 0 rather than failing the run
        try:
            return int(round(reader()))
        except (psutil.Error, OSError, ValueError, TypeError) as e:
            logger.warning("Could not read %s usage, using 0: %s", label, e)
            return 0
