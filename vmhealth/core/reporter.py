"""Text rendering of health reports for the terminal."""
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from .classifier import HealthReport, PerMetricResult
from .severity import SeverityLevel

DISPLAY_NAMES = {
    "cpu": "CPU",
    "memory": "Memory",
    "disk": "Disk",
}

RECOMMENDATIONS = {
    "cpu": "Consider optimizing CPU-intensive processes or scaling up CPU resources",
    "memory": "Consider freeing up memory or adding more RAM",
    "disk": "Consider cleaning up disk space or expanding storage",
}

SEVERITY_STYLES = {
    SeverityLevel.CRITICAL: "bold red",
    SeverityLevel.WARNING: "yellow",
    SeverityLevel.OK: "green",
}


def format_metric_line(result: PerMetricResult) -> str:
    """Format one metric as "<Name> Usage: <v>% (Threshold: <t>%) - <SEV>"."""
    name = DISPLAY_NAMES[result.metric.name]
    return (f"{name} Usage: {result.metric.value}% "
            f"(Threshold: {result.threshold}%) - {result.severity}")


def render_report(report: HealthReport, explain: bool = False) -> List[str]:
    """Render a report as output lines."""
    lines = [f"VM Health Status: {report.status_label}"]
    if not explain:
        return lines

    lines += ["", "Health Status Explanation:", "-------------------------"]
    lines += [format_metric_line(result) for result in report.per_metric]
    lines += ["", f"Overall Status: {report.message}"]

    unhealthy = report.unhealthy_metrics()
    if unhealthy:
        lines += ["", "Recommendations:"]
        for result in unhealthy:
            name = result.metric.name
            lines.append(f"- {DISPLAY_NAMES[name]}: {RECOMMENDATIONS[name]}")
    return lines


class Reporter:
    """Writes rendered reports to the terminal with Rich."""

    def __init__(self, console: Optional[Console] = None, silent: bool = False):
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.silent = silent

    def print_report(self, report: HealthReport, explain: bool = False):
        """Print the report unless running silently."""
        if self.silent:
            return
        for line in render_report(report, explain):
            self.console.print(self._styled(line, report))

    def _styled(self, line: str, report: HealthReport) -> Text:
        text = Text(line)
        if line.startswith("VM Health Status:"):
            text.stylize(SEVERITY_STYLES[report.overall], len("VM Health Status: "))
            return text
        for result in report.per_metric:
            if line == format_metric_line(result):
                suffix = str(result.severity)
                text.stylize(SEVERITY_STYLES[result.severity], len(line) - len(suffix))
                break
        return text
