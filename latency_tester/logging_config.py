"""Logging configuration for latency tester."""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "LATENCY_TESTER_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> int:
    """Configure application-wide logging.

    The level comes from ``level`` if given, else from the
    LATENCY_TESTER_LOG_LEVEL environment variable, else WARNING so that
    console reports are not interleaved with log lines. Logs go to stderr.

    Examples:
        # Debug level for troubleshooting a single endpoint
        $ LATENCY_TESTER_LOG_LEVEL=DEBUG latency-tester test example.com

    Returns:
        The numeric level that was applied.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(level_name, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    # Connection pool chatter drowns out probe logs at DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.WARNING))

    logger = logging.getLogger(__name__)
    logger.info("Logging configured: level=%s", logging.getLevelName(log_level))
    return log_level
