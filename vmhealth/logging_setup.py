"""Log file setup for health check runs."""
import logging
import os
import sys

LOGGER_NAME = "vmhealth"
LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: str, level: int = logging.INFO) -> logging.Handler:
    """Send package log records to log_file, appending one line per event.

    Falls back to stderr when the log file cannot be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    error = None
    try:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handler = logging.FileHandler(log_file, mode="a")
    except OSError as e:
        error = e
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    if error is not None:
        logger.warning("Cannot open log file %s, logging to stderr: %s", log_file, error)
    return handler
