"""
Logging configuration.

Thin wrapper over the standard logging module. Call sites pass structured
context through ``extra={...}``; the formatter appends those fields to the
message so they survive into plain-text logs.
"""

import logging
import os
import sys

# Attributes present on every LogRecord; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_PACKAGE_LOGGERS = ("vitrin_core", "vitrin_database")

_initialized = False


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return base
        rendered = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{base} | {rendered}"


def init_logging(level: str | None = None) -> None:
    """
    Configure the package loggers.

    Safe to call more than once; only the first call installs handlers,
    later calls just adjust the level.

    Args:
        level: Log level name. Defaults to the LOG_LEVEL environment variable or INFO.
    """
    global _initialized

    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    for name in _PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        package_logger.setLevel(resolved)
        if not _initialized:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(ExtraFieldsFormatter(_LOG_FORMAT))
            package_logger.addHandler(handler)
            package_logger.propagate = False

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
