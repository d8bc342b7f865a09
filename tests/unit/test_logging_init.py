from __future__ import annotations

import logging
from io import StringIO

from sheetmap.logging.init import LabeledFormatter, SUMMARY_LEVEL, get_logger, setup_logging


def test_setup_logging_creates_logger_with_labeled_formatter():
    """Test logger name, level, handler and propagation."""
    logger = setup_logging()
    assert logger.name == "sheetmap"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    """Test the INFO/WARN/ERROR/SUMMARY prefixes."""
    captured = StringIO()
    logger = logging.getLogger("test_sheetmap_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_get_logger_returns_configured_logger():
    """get_logger returns the configured logger."""
    configured = setup_logging()
    assert get_logger() is configured


def test_setup_logging_idempotent():
    """Test that repeated setup keeps a single handler."""
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_library_loggers_are_children():
    """Module loggers hang off the sheetmap logger."""
    setup_logging()
    child = logging.getLogger("sheetmap.services.mapify")
    assert child.parent is logging.getLogger("sheetmap")


def test_enable_debug_names_the_module(capsys):
    """Test that DEBUG lines carry the module name."""
    from sheetmap.logging.init import enable_debug

    enable_debug()
    logging.getLogger("sheetmap.services.mapify").debug("skipping row %s", "Sheet1:_3")
    assert capsys.readouterr().out.strip() == "DEBUG [services.mapify] skipping row Sheet1:_3"
