from .config import Config
from .config_manager import ConfigManager
from .threshold_config import ThresholdConfig

__all__ = ["Config", "ConfigManager", "ThresholdConfig"]
