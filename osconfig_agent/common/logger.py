"""Logging infrastructure for the OSConfig agent.

Policies log under the ``osconfig_agent`` namespace; the CLI attaches a
rotating log file and a console handler to that namespace once.
"""

import logging
import logging.handlers
import os

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"  # ISO 8601


def setup_logger(
    name: str,
    log_dir: str = "/var/log/google-osconfig-agent",
    level: str = "INFO",
    file_logging: bool = True,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach file and console handlers to an agent logger.

    Args:
        name: Logger name, usually the agent namespace
        log_dir: Directory for ``<name>.log``
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        file_logging: Write to a rotating log file
        console_logging: Write to stderr
        max_bytes: Log file size that triggers rotation
        backup_count: Rotated files to keep

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a known logging level
    """
    level_upper = level.upper()
    if level_upper not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: {', '.join(VALID_LEVELS)}"
        )

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level_upper))

    # Already configured by an earlier run in this process
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []

    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, f"{name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    if console_logging:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger of the agent's logger namespace.

    Args:
        name: Component name (e.g. "yum_policy")

    Returns:
        Logger instance
    """
    return logging.getLogger(f"osconfig_agent.{name}")
