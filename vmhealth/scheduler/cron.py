"""Registration of the periodic health check in the user's crontab."""
import logging
import subprocess
from typing import List

from ..errors import SchedulerError

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE = "*/5 * * * *"


def build_cron_entry(command: str, schedule: str = DEFAULT_SCHEDULE) -> str:
    return f"{schedule} {command}"


class CronScheduler:
    """Reads and rewrites the crontab through the crontab command."""

    def __init__(self, timeout: float = 10.0, crontab_command: str = "crontab"):
        self.timeout = timeout
        self.crontab_command = crontab_command

    def current_entries(self) -> List[str]:
        """Lines of the current crontab; empty when the user has none."""
        try:
            result = subprocess.run(
                [self.crontab_command, "-l"],
                capture_output=True,
                timeout=self.timeout,
                text=True,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            raise SchedulerError(f"Cannot read crontab: {e}") from e
        # crontab -l exits non-zero when no table exists yet
        if result.returncode != 0:
            return []
        return result.stdout.splitlines()

    def register(self, entry: str) -> bool:
        """Add entry to the crontab. Returns False if it was already there."""
        entries = self.current_entries()
        if entry in (line.strip() for line in entries):
            logger.info("Cron job already present: %s", entry)
            return False

        table = "\n".join(entries + [entry]) + "\n"
        try:
            result = subprocess.run(
                [self.crontab_command, "-"],
                input=table,
                capture_output=True,
                timeout=self.timeout,
                text=True,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            raise SchedulerError(f"Cannot write crontab: {e}") from e
        if result.returncode != 0:
            raise SchedulerError(
                f"crontab exited with {result.returncode}: {result.stderr.strip()}")
        logger.info("Cron job setup completed")
        return True
