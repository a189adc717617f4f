"""Shared fixtures for health check tests."""
import logging
from datetime import datetime

import pytest

from vmhealth.collectors.system_models import SystemMetrics
from vmhealth.config import Config, ThresholdConfig

FIXED_TIME = datetime(2024, 3, 1, 12, 30, 45)


class FakeCollector:
    """Collector returning a fixed sample and counting calls."""

    def __init__(self, cpu=0, memory=0, disk=0):
        self.metrics = SystemMetrics(cpu, memory, disk, FIXED_TIME)
        self.calls = 0

    def collect(self):
        self.calls += 1
        return self.metrics


class FakeTransport:
    """Transport recording published messages."""

    def __init__(self, succeed=True):
        self.succeed = succeed
        self.sent = []

    def publish(self, subject, body, destination, region):
        self.sent.append((subject, body, destination, region))
        return self.succeed


@pytest.fixture
def make_metrics():
    def _make(cpu=0, memory=0, disk=0):
        return SystemMetrics(cpu, memory, disk, FIXED_TIME)
    return _make


@pytest.fixture
def thresholds():
    return ThresholdConfig()


@pytest.fixture
def config(tmp_path):
    return Config(
        sns_topic_arn="arn:aws:sns:us-east-1:123456789012:vm-health-alerts",
        log_file=str(tmp_path / "vm_health_check.log"),
    )


@pytest.fixture
def fake_collector():
    return FakeCollector


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Detach log handlers a test attached to the package logger."""
    yield
    logger = logging.getLogger("vmhealth")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
