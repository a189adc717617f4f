"""Main configuration data structure."""
from dataclasses import dataclass, field
from typing import Optional

from .threshold_config import ThresholdConfig

DEFAULT_CONFIG_FILE = "/etc/vm_health_check.conf"
DEFAULT_LOG_FILE = "/var/log/vm_health_check.log"
DEFAULT_AWS_REGION = "us-east-1"


@dataclass(frozen=True)
class Config:
    """Settings for one health check run."""
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    sns_topic_arn: str = ""
    aws_region: str = DEFAULT_AWS_REGION
    log_file: str = DEFAULT_LOG_FILE
    config_file: Optional[str] = None
    config_loaded: bool = False

    @property
    def notifications_configured(self) -> bool:
        """True when a notification destination is set."""
        return bool(self.sns_topic_arn)
