from __future__ import annotations

import logging
import sys

"""Console logging for the sheetmap CLI.

Lines are ``LABEL message`` (INFO / WARN / ERROR / SUMMARY). Library modules
log through ``logging.getLogger(__name__)`` under the ``sheetmap`` namespace
and never add handlers; DEBUG lines also name the emitting module so that
decode / mapify / extractor traces can be told apart.
"""

__all__ = [
    "SUMMARY_LEVEL",
    "LOGGER_NAME",
    "LabeledFormatter",
    "setup_logging",
    "enable_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
]

# between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25
LOGGER_NAME = "sheetmap"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        if record.levelno == logging.DEBUG and record.name.startswith(LOGGER_NAME + "."):
            return f"{label} [{record.name[len(LOGGER_NAME) + 1:]}] {record.getMessage()}"
        return f"{label} {record.getMessage()}"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach one labeled stdout handler to the ``sheetmap`` logger. Idempotent."""
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # the root logger may have its own handlers (pytest, host apps)
    logger.propagate = False

    _logger = logger
    return logger


def enable_debug() -> logging.Logger:
    """Lower the logger and its handlers to DEBUG (``--debug``)."""
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger (tests)."""
    global _logger
    _logger = None
