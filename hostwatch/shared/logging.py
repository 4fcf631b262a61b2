"""Logging setup for the hostwatch service."""

import logging
from typing import Iterable

# checks and listeners run on worker and timer threads
LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"

# one aiohttp session per check; chatty at DEBUG
NOISY_LOGGERS = ("aiohttp", "asyncio", "paho")


def setup_logging(level: str = "INFO", noisy_loggers: Iterable[str] = NOISY_LOGGERS) -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        noisy_loggers: Loggers kept at WARNING or above.

    Raises:
        ValueError: If level is not a known level name.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # basicConfig is a no-op when handlers already exist
    logging.getLogger().setLevel(log_level)

    for name in noisy_loggers:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
