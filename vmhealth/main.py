"""Main entry point for the VM health check."""
import argparse
import logging
import os
import shlex
import sys
from typing import List, Optional

from rich.console import Console

from .collectors.system_collector import Collector, SystemCollector
from .config import Config, ConfigManager
from .config.config import DEFAULT_CONFIG_FILE, DEFAULT_LOG_FILE
from .core.classifier import HealthReport, classify_report
from .core.reporter import Reporter
from .errors import ConfigError, SchedulerError, VmHealthError
from .logging_setup import setup_logging
from .notify.sns import Notifier, SnsTransport
from .scheduler.cron import CronScheduler, build_cron_entry

logger = logging.getLogger(__name__)

EXAMPLES = """\
Examples:
  %(prog)s explain --notify
  %(prog)s --cpu-threshold 80 --memory-threshold 70
  %(prog)s --silent --notify
"""


class UsageError(VmHealthError):
    """Command line could not be parsed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "vm-health-check",
        description="Check CPU, memory and disk utilization of this host.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("explain", nargs="?", choices=["explain"],
                        help="display detailed explanation of health status")
    parser.add_argument("--cpu-threshold", type=int, metavar="N",
                        help="CPU threshold percentage (default: 60)")
    parser.add_argument("--memory-threshold", type=int, metavar="N",
                        help="memory threshold percentage (default: 60)")
    parser.add_argument("--disk-threshold", type=int, metavar="N",
                        help="disk threshold percentage (default: 60)")
    parser.add_argument("--config", metavar="FILE", default=DEFAULT_CONFIG_FILE,
                        help="use specific configuration file")
    parser.add_argument("--log", metavar="FILE", help="use specific log file")
    parser.add_argument("--notify", action="store_true",
                        help="send SNS notifications if unhealthy")
    parser.add_argument("--silent", action="store_true",
                        help="run in silent mode (no output, only logging)")
    parser.add_argument("--setup-cron", action="store_true",
                        help="setup automated cron job")
    parser.add_argument("--init-config", action="store_true",
                        help="write a default configuration file and exit")
    parser.add_argument("--help", action="store_true",
                        help="display this help message")
    return parser


def parse_args(parser: argparse.ArgumentParser, argv: Optional[List[str]] = None):
    """Parse argv, rejecting anything the parser does not know."""
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        raise UsageError(f"Unknown option: {unknown[0]}")
    return args


def scheduled_command(args, script_path: str) -> str:
    """Command line the cron job runs: silent, notifying, same files."""
    parts = [script_path, "--silent", "--notify"]
    if args.config != DEFAULT_CONFIG_FILE:
        parts += ["--config", os.path.abspath(args.config)]
    if args.log:
        parts += ["--log", os.path.abspath(args.log)]
    return " ".join(shlex.quote(part) for part in parts)


def setup_cron(args, console: Console, scheduler: Optional[CronScheduler] = None) -> int:
    """Register the every-five-minutes job. Returns the exit code."""
    scheduler = scheduler or CronScheduler()
    entry = build_cron_entry(scheduled_command(args, os.path.realpath(sys.argv[0])))
    console.print("Setting up cron job for automated monitoring...")
    try:
        added = scheduler.register(entry)
    except SchedulerError as e:
        console.print(f"Failed to setup cron job: {e}")
        logger.error("Failed to setup cron job: %s", e)
        return 1
    if added:
        console.print("Cron job added successfully. The script will run every 5 minutes.")
    else:
        console.print("Cron job already registered.")
    console.print(f"Cron entry: {entry}", markup=False)
    return 0


def init_config(config_path: str, console: Console) -> int:
    """Write the default configuration file. Returns the exit code."""
    try:
        created = ConfigManager.write_default_config(config_path)
    except ConfigError as e:
        console.print(f"Failed to create configuration file: {e}", markup=False)
        return 1
    if created:
        console.print(f"Default configuration file created at {config_path}", markup=False)
        console.print("Please edit the configuration file to set your SNS topic ARN "
                      "and other preferences.")
    else:
        console.print(f"Configuration file already exists at {config_path}", markup=False)
    return 0


def run_check(config: Config, collector: Collector, reporter: Reporter,
              notifier: Notifier, explain: bool = False, notify: bool = False) -> HealthReport:
    """Sample, classify, alert and report once."""
    metrics = collector.collect()
    logger.info("Health check started - CPU: %d%%, Memory: %d%%, Disk: %d%%",
                metrics.cpu_percent, metrics.memory_percent, metrics.disk_percent)

    report = classify_report(metrics, config.thresholds)
    notifier.notify(report, enabled=notify)
    reporter.print_report(report, explain=explain)

    logger.info("Health check completed - Status: %s", report.status_label)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    console = Console(highlight=False, soft_wrap=True)
    parser = build_parser()
    try:
        args = parse_args(parser, argv)
    except UsageError as e:
        err = Console(stderr=True, highlight=False, soft_wrap=True)
        err.print(str(e), markup=False)
        err.print(parser.format_help(), markup=False, end="")
        return 1
    if args.help:
        console.print(parser.format_help(), markup=False, end="")
        return 1

    if args.init_config:
        return init_config(args.config, console)

    # Registration does not depend on the config file being valid
    if args.setup_cron:
        setup_logging(args.log or DEFAULT_LOG_FILE)
        return setup_cron(args, console)

    try:
        config = ConfigManager.load_config(args.config, overrides={
            "CPU_THRESHOLD": args.cpu_threshold,
            "MEMORY_THRESHOLD": args.memory_threshold,
            "DISK_THRESHOLD": args.disk_threshold,
            "LOG_FILE": args.log,
        })
    except ConfigError as e:
        Console(stderr=True, highlight=False).print(f"Invalid configuration: {e}", markup=False)
        return 1

    setup_logging(config.log_file)
    if config.config_loaded:
        logger.info("Configuration loaded from %s", config.config_file)

    run_check(
        config,
        collector=SystemCollector(),
        reporter=Reporter(console, silent=args.silent),
        notifier=Notifier(config, SnsTransport()),
        explain=bool(args.explain),
        notify=args.notify,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
