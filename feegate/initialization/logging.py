"""
Initialization - Logging Module.

Configures loguru for structured (JSON) output on stderr, with an optional
rotating file sink.
"""

import sys

from loguru import logger


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: str | None = None,
) -> None:
    """
    Configure logger sinks.

    Args:
        level: Minimum log level
        json_output: Serialize records as JSON (bound fields under record.extra)
        log_file: Path of an additional rotating log file (optional)
    """
    logger.remove()
    logger.add(sys.stderr, level=level, serialize=json_output)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
            serialize=json_output,
        )
