"""Severity levels for health classification."""
from enum import IntEnum


class SeverityLevel(IntEnum):
    """Ordered severity, OK < WARNING < CRITICAL."""
    OK = 0
    WARNING = 1
    CRITICAL = 2

    def __str__(self) -> str:
        return self.name
