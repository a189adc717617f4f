"""Threshold classification of host metrics into a health report."""
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from ..collectors.system_models import Metric, SystemMetrics
from ..config.threshold_config import ThresholdConfig
from .severity import SeverityLevel

# Critical level sits this many points above the warning threshold
CRITICAL_MARGIN = 20

STATUS_MESSAGES = {
    SeverityLevel.CRITICAL: "Critical resource utilization detected",
    SeverityLevel.WARNING: "Warning: High resource utilization",
    SeverityLevel.OK: "All resources within normal limits",
}


@dataclass(frozen=True)
class PerMetricResult:
    """Classification of one metric against its threshold."""
    metric: Metric
    threshold: int
    severity: SeverityLevel


@dataclass(frozen=True)
class HealthReport:
    """Outcome of one health check run."""
    per_metric: Tuple[PerMetricResult, ...]
    overall: SeverityLevel
    timestamp: datetime

    @property
    def is_healthy(self) -> bool:
        return self.overall == SeverityLevel.OK

    @property
    def status_label(self) -> str:
        """Overall status as shown to operators: HEALTHY, WARNING or CRITICAL."""
        return "HEALTHY" if self.is_healthy else self.overall.name

    @property
    def message(self) -> str:
        return status_message(self.overall)

    def unhealthy_metrics(self) -> Tuple[PerMetricResult, ...]:
        """Per-metric results whose severity is not OK."""
        return tuple(r for r in self.per_metric if r.severity != SeverityLevel.OK)


def classify_metric(value: int, threshold: int) -> SeverityLevel:
    """Map a metric value and its warning threshold to a severity.

    The critical bound is ``threshold + 20`` and is not clamped to 100, so a
    warning threshold above 80 leaves CRITICAL unreachable for percentages.
    Out-of-range values are classified as given.
    """
    if value >= threshold + CRITICAL_MARGIN:
        return SeverityLevel.CRITICAL
    if value >= threshold:
        return SeverityLevel.WARNING
    return SeverityLevel.OK


def classify_report(metrics: SystemMetrics, thresholds: ThresholdConfig) -> HealthReport:
    """Classify cpu, memory and disk and reduce them to an overall severity."""
    results = tuple(
        PerMetricResult(
            metric=metric,
            threshold=thresholds.for_metric(metric.name),
            severity=classify_metric(metric.value, thresholds.for_metric(metric.name)),
        )
        for metric in metrics.as_metrics()
    )
    overall = max((r.severity for r in results), default=SeverityLevel.OK)
    return HealthReport(per_metric=results, overall=overall, timestamp=metrics.timestamp)


def status_message(overall: SeverityLevel) -> str:
    """One-line description of an overall severity."""
    return STATUS_MESSAGES[overall]
