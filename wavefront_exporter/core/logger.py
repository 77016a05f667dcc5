"""Logging configuration for the Wavefront exporter."""

from __future__ import annotations

import logging
from typing import Literal

LogLevel = Literal["silent", "error", "warn", "info", "debug"]

ROOT_LOGGER_NAME = "wavefront_exporter"

_LEVELS: dict[str, int] = {
    "silent": logging.CRITICAL + 1,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_current_level: LogLevel = "info"


def configure_logger(log_level: LogLevel = "info", prefix: str = "WavefrontExporter") -> logging.Logger:
    """
    Set up the package logger with a prefixed stream handler.

    Calling it again replaces the previous handler instead of adding one.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f"[{prefix}] %(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    set_log_level(log_level)
    return logger


def set_log_level(log_level: LogLevel) -> None:
    global _current_level
    if log_level not in _LEVELS:
        raise ValueError(f"Invalid log level: {log_level}")
    _current_level = log_level
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(_LEVELS[log_level])


def get_log_level() -> LogLevel:
    return _current_level
