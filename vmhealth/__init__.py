"""VM health check: sample CPU, memory and disk usage and classify host health."""

__version__ = "1.0.0"
