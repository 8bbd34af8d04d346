"""
Logging configuration.

WHAT: Sets the process-wide log format and level once, at app creation.

HOW: Plain ``logging.basicConfig``; every module logs through
``logging.getLogger(__name__)``.
"""

import logging

_LOGGING_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_log_level(level_name: str) -> int:
    """
    Map a level name such as ``"debug"`` to its ``logging`` constant.

    Unknown names resolve to INFO.
    """
    level = logging.getLevelName(level_name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level_name: str = "INFO") -> None:
    """Configure root logging from the LOG_LEVEL setting."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = resolve_log_level(level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if level == logging.INFO and level_name.strip().upper() != "INFO":
        logging.getLogger(__name__).warning(
            "Invalid log level '%s', using 'INFO' as default", level_name
        )
    _LOGGING_CONFIGURED = True
