"""Tests for logger.py - package logger configuration."""

from __future__ import annotations

import logging

import pytest

from wavefront_exporter.core.logger import (
    ROOT_LOGGER_NAME,
    configure_logger,
    get_log_level,
    set_log_level,
)


@pytest.fixture(autouse=True)
def restore_logger():
    """Undo logger configuration so other tests keep capturing logs."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    previous = get_log_level()
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    set_log_level(previous)
    logger.setLevel(level)


class TestConfigureLogger:
    """Tests for configure_logger function."""

    def test_sets_level_and_single_handler(self):
        logger = configure_logger(log_level="debug", prefix="Test")

        assert logger.name == ROOT_LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_reconfiguring_replaces_handler(self):
        configure_logger(log_level="info")
        logger = configure_logger(log_level="warn")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_prefix_appears_in_format(self):
        logger = configure_logger(prefix="WF")
        record = logging.LogRecord("wavefront_exporter.x", logging.INFO, __file__, 1, "hello", None, None)

        assert logger.handlers[0].format(record).startswith("[WF] ")


class TestSetLogLevel:
    """Tests for set_log_level and get_log_level."""

    def test_round_trips_level(self):
        set_log_level("error")

        assert get_log_level() == "error"
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.ERROR

    def test_silent_disables_output(self):
        set_log_level("silent")
        assert not logging.getLogger(ROOT_LOGGER_NAME).isEnabledFor(logging.CRITICAL)

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            set_log_level("verbose")  # type: ignore[arg-type]
