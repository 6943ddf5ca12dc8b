"""
Logging infrastructure setup.

Console logging for the ``ubiflow`` command; library users configure
logging themselves.
"""

import logging
import os

import coloredlogs  # type: ignore

# Get logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

LEVEL_STYLES = {
    "debug": {"color": "cyan"},
    "info": {"color": "green"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"color": "red", "bold": True},
}

# Third-party loggers that are chatty at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def get_log_level(verbose: bool = False) -> int:
    """
    Resolve the logging level.

    ``verbose`` forces DEBUG; otherwise LOG_LEVEL is used, falling back to
    INFO when unset or unknown.
    """
    if verbose:
        return logging.DEBUG
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(verbose: bool = False) -> None:
    """Configure colored console logging."""
    log_level = get_log_level(verbose)

    coloredlogs.install(
        level=log_level,
        fmt=LOG_FORMAT,
        level_styles=LEVEL_STYLES,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))

    logger.debug("log level: %s", logging.getLevelName(log_level))
