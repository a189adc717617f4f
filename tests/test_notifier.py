"""
NOTIFIER TESTS

Alert message building and delivery through the aws command line tool.
"""
import subprocess
from types import SimpleNamespace

import pytest

from vmhealth.config import Config
from vmhealth.core.classifier import classify_report
from vmhealth.notify import sns
from vmhealth.notify.sns import Notifier, SnsTransport, build_message, build_subject

TOPIC = "arn:aws:sns:us-east-1:123456789012:vm-health-alerts"


@pytest.fixture
def aws_available(monkeypatch):
    monkeypatch.setattr(sns.shutil, "which", lambda name: "/usr/bin/aws")


class TestMessages:
    """Subject and body."""

    def test_subject(self, make_metrics, thresholds):
        report = classify_report(make_metrics(85, 40, 30), thresholds)
        assert build_subject(report) == "VM Health Alert: CRITICAL"

    def test_body(self, make_metrics, thresholds):
        report = classify_report(make_metrics(65, 40, 30), thresholds)
        assert build_message(report) == (
            "VM Health Status: WARNING\n"
            "\n"
            "Resource Utilization:\n"
            "- CPU: 65% (Threshold: 60%) - WARNING\n"
            "- Memory: 40% (Threshold: 60%) - OK\n"
            "- Disk: 30% (Threshold: 60%) - OK\n"
            "\n"
            "Warning: High resource utilization\n"
            "\n"
            "Timestamp: 2024-03-01 12:30:45"
        )


class TestSnsTransport:
    """Delivery via subprocess."""

    def test_publish_runs_aws_cli(self, monkeypatch, aws_available):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return SimpleNamespace(returncode=0, stdout="{}", stderr="")

        monkeypatch.setattr(sns.subprocess, "run", fake_run)

        assert SnsTransport(timeout=5).publish("subj", "body", TOPIC, "eu-west-1")
        cmd, kwargs = calls[0]
        assert cmd == ["/usr/bin/aws", "sns", "publish", "--topic-arn", TOPIC,
                       "--subject", "subj", "--message", "body", "--region", "eu-west-1"]
        assert kwargs["timeout"] == 5

    def test_no_destination_is_noop(self, monkeypatch, caplog):
        monkeypatch.setattr(sns.subprocess, "run", pytest.fail)
        with caplog.at_level("INFO"):
            assert not SnsTransport().publish("subj", "body", "", "us-east-1")
        assert "SNS_TOPIC_ARN not set" in caplog.text

    def test_missing_cli_is_noop(self, monkeypatch, caplog):
        monkeypatch.setattr(sns.shutil, "which", lambda name: None)
        monkeypatch.setattr(sns.subprocess, "run", pytest.fail)
        with caplog.at_level("INFO"):
            assert not SnsTransport().publish("subj", "body", TOPIC, "us-east-1")
        assert "AWS CLI not available" in caplog.text

    def test_rejected_publish(self, monkeypatch, aws_available, caplog):
        monkeypatch.setattr(sns.subprocess, "run", lambda cmd, **kw: SimpleNamespace(
            returncode=255, stdout="", stderr="AccessDenied"))
        assert not SnsTransport().publish("subj", "body", TOPIC, "us-east-1")
        assert "AccessDenied" in caplog.text

    def test_timeout(self, monkeypatch, aws_available):
        def slow(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(sns.subprocess, "run", slow)
        assert not SnsTransport(timeout=1).publish("subj", "body", TOPIC, "us-east-1")


class TestNotifier:
    """When alerts are sent."""

    def test_disabled_sends_nothing(self, make_metrics, thresholds, fake_transport):
        report = classify_report(make_metrics(65, 40, 30), thresholds)
        assert not Notifier(Config(sns_topic_arn=TOPIC), fake_transport).notify(report, enabled=False)
        assert fake_transport.sent == []

    def test_healthy_sends_nothing(self, make_metrics, thresholds, fake_transport):
        report = classify_report(make_metrics(45, 50, 40), thresholds)
        assert not Notifier(Config(sns_topic_arn=TOPIC), fake_transport).notify(report, enabled=True)
        assert fake_transport.sent == []

    def test_no_topic_configured_sends_nothing(self, make_metrics, thresholds,
                                               fake_transport, caplog):
        report = classify_report(make_metrics(95, 40, 30), thresholds)
        with caplog.at_level("INFO"):
            assert not Notifier(Config(), fake_transport).notify(report, enabled=True)
        assert fake_transport.sent == []
        assert "SNS_TOPIC_ARN not set" in caplog.text

    def test_unhealthy_sends_alert(self, make_metrics, thresholds, fake_transport):
        report = classify_report(make_metrics(65, 40, 30), thresholds)
        notifier = Notifier(Config(sns_topic_arn=TOPIC, aws_region="eu-west-1"), fake_transport)

        assert notifier.notify(report, enabled=True)
        subject, body, destination, region = fake_transport.sent[0]
        assert subject == "VM Health Alert: WARNING"
        assert body == build_message(report)
        assert (destination, region) == (TOPIC, "eu-west-1")
