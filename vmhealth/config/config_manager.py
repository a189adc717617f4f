"""Configuration loading and management."""
import os
import re
from typing import Any, Dict, Mapping, Optional

import yaml

from ..errors import ConfigError
from .config import Config, DEFAULT_AWS_REGION, DEFAULT_LOG_FILE
from .threshold_config import DEFAULT_THRESHOLD, ThresholdConfig

THRESHOLD_KEYS = {
    "cpu": "CPU_THRESHOLD",
    "memory": "MEMORY_THRESHOLD",
    "disk": "DISK_THRESHOLD",
}
KNOWN_KEYS = set(THRESHOLD_KEYS.values()) | {"SNS_TOPIC_ARN", "AWS_REGION", "LOG_FILE"}

_ASSIGNMENT = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$")

DEFAULT_CONFIG_TEMPLATE = f"""\
# VM Health Check Configuration File
# Threshold values (percentage)
CPU_THRESHOLD: {DEFAULT_THRESHOLD}
MEMORY_THRESHOLD: {DEFAULT_THRESHOLD}
DISK_THRESHOLD: {DEFAULT_THRESHOLD}

# SNS Configuration
SNS_TOPIC_ARN: ""
AWS_REGION: "{DEFAULT_AWS_REGION}"

# Logging
LOG_FILE: "{DEFAULT_LOG_FILE}"
"""


class ConfigManager:
    """Configuration loading and management."""

    @staticmethod
    def load_config(config_path: Optional[str] = None,
                    overrides: Optional[Mapping[str, Any]] = None) -> Config:
        """Build the run configuration from defaults, file values and overrides.

        Command-line overrides win over file values, which win over the
        built-in defaults. A missing file is not an error.
        """
        values: Dict[str, Any] = {}
        loaded = False
        if config_path and os.path.isfile(config_path):
            values = ConfigManager.read_config_file(config_path)
            loaded = True

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key.upper()] = value

        thresholds = ThresholdConfig(**{
            name: ConfigManager._as_threshold(key, values.get(key, DEFAULT_THRESHOLD))
            for name, key in THRESHOLD_KEYS.items()
        })

        return Config(
            thresholds=thresholds,
            sns_topic_arn=str(values.get("SNS_TOPIC_ARN") or ""),
            aws_region=str(values.get("AWS_REGION") or DEFAULT_AWS_REGION),
            log_file=str(values.get("LOG_FILE") or DEFAULT_LOG_FILE),
            config_file=config_path,
            config_loaded=loaded,
        )

    @staticmethod
    def read_config_file(config_path: str) -> Dict[str, Any]:
        """Read recognized keys from a YAML or KEY=VALUE config file."""
        try:
            with open(config_path, "r") as f:
                text = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e

        settings = [line for line in text.splitlines()
                    if line.strip() and not line.strip().startswith("#")]
        if not settings:
            return {}

        if all(_ASSIGNMENT.match(line) for line in settings):
            config_data = ConfigManager.parse_assignments(text, config_path)
        else:
            try:
                config_data = yaml.safe_load(text)
            except yaml.YAMLError:
                config_data = None
        if not isinstance(config_data, dict):
            config_data = ConfigManager.parse_assignments(text, config_path)

        return {
            str(key).upper(): value
            for key, value in config_data.items()
            if str(key).upper() in KNOWN_KEYS
        }

    @staticmethod
    def parse_assignments(text: str, source: str = "<config>") -> Dict[str, str]:
        """Parse shell-style KEY=VALUE lines, as written by older installs."""
        values = {}
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            match = _ASSIGNMENT.match(line)
            if not match:
                raise ConfigError(f"{source}:{lineno}: cannot parse {raw!r}")
            key, value = match.groups()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            else:
                value = value.split("#", 1)[0].strip()
            values[key] = value
        return values

    @staticmethod
    def write_default_config(config_path: str) -> bool:
        """Write the default config file. Returns False if it already exists."""
        if os.path.exists(config_path):
            return False
        directory = os.path.dirname(config_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(config_path, "x") as f:
                f.write(DEFAULT_CONFIG_TEMPLATE)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_path}: {e}") from e
        return True

    @staticmethod
    def _as_threshold(key: str, value: Any) -> int:
        if value is None or str(value).strip() == "":
            return DEFAULT_THRESHOLD
        if isinstance(value, bool):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigError(f"{key} must be an integer, got {value!r}") from None
