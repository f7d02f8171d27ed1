"""Logging setup for the voice server process."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s <%(levelname)s> %(message)s"

# Third-party loggers that are too chatty at INFO.
QUIET_LOGGERS = ("socketio", "engineio")


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging for the process.

    Args:
        log_level: Level name for the root logger
        log_file: Optional path for an additional file handler
    """
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
