"""Exception types raised across the health check."""


class VmHealthError(Exception):
    """Base class for health check errors."""


class ConfigError(VmHealthError):
    """Configuration file or value could not be used."""


class SchedulerError(VmHealthError):
    """Periodic job registration failed."""
