"""Alert delivery through AWS SNS using the aws command line tool."""
import logging
import shutil
import subprocess
from typing import Optional

from ..config import Config
from ..core.classifier import HealthReport
from ..core.reporter import DISPLAY_NAMES

logger = logging.getLogger(__name__)


def build_subject(report: HealthReport) -> str:
    return f"VM Health Alert: {report.status_label}"


def build_message(report: HealthReport) -> str:
    """Alert body with every metric, the status message and a timestamp."""
    lines = [f"VM Health Status: {report.status_label}", "", "Resource Utilization:"]
    lines += [f"- {DISPLAY_NAMES[r.metric.name]}: {r.metric.value}% "
              f"(Threshold: {r.threshold}%) - {r.severity}"
              for r in report.per_metric]
    lines += ["", report.message, "",
              f"Timestamp: {report.timestamp.strftime('%Y-%m-%d %H:%M:%S')}"]
    return "\n".join(lines)


class SnsTransport:
    """Publishes messages to an SNS topic via `aws sns publish`."""

    def __init__(self, timeout: float = 10.0, aws_command: str = "aws"):
        self.timeout = timeout
        self.aws_command = aws_command

    def publish(self, subject: str, body: str, destination: str, region: str) -> bool:
        """Try to deliver a message. Returns True only on confirmed delivery."""
        if not destination:
            logger.info("SNS notification skipped - SNS_TOPIC_ARN not set")
            return False
        executable = shutil.which(self.aws_command)
        if executable is None:
            logger.info("SNS notification skipped - AWS CLI not available")
            return False

        try:
            result = subprocess.run(
                [executable, "sns", "publish",
                 "--topic-arn", destination,
                 "--subject", subject,
                 "--message", body,
                 "--region", region],
                capture_output=True,
                timeout=self.timeout,
                text=True,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Failed to send SNS notification - timed out after %ss", self.timeout)
            return False
        except OSError as e:
            logger.warning("Failed to send SNS notification - %s", e)
            return False

        if result.returncode != 0:
            logger.warning("Failed to send SNS notification - %s",
                           result.stderr.strip() or f"exit code {result.returncode}")
            return False
        logger.info("SNS notification sent successfully")
        return True


class Notifier:
    """Sends an alert for unhealthy reports when notifications are enabled."""

    def __init__(self, config: Config, transport: Optional[SnsTransport] = None):
        self.config = config
        self.transport = transport or SnsTransport()

    def notify(self, report: HealthReport, enabled: bool) -> bool:
        """Dispatch an alert if enabled and the report is not healthy."""
        if not enabled or report.is_healthy:
            return False
        if not self.config.notifications_configured:
            logger.info("SNS notification skipped - SNS_TOPIC_ARN not set")
            return False
        return self.transport.publish(
            build_subject(report),
            build_message(report),
            self.config.sns_topic_arn,
            self.config.aws_region,
        )
