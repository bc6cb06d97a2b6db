"""Logging setup shared by every receipt-tally module.

All loggers hang off the ``receipt_tally`` namespace logger, which gets a
single stderr handler the first time any module asks for a logger. The level
comes from ``RECEIPT_TALLY_LOG_LEVEL`` and can be raised at runtime with
``set_log_level`` (the CLI does this for ``--verbose``).

Usage:
    from receipt_tally.runtime import get_logger
    logger = get_logger(__name__)
    logger.debug("merged %r into %r", key, product.canonical_name)
"""

import logging
import os
import sys
from typing import TextIO

LOG_NAMESPACE = "receipt_tally"
LOG_LEVEL_ENV_VAR = "RECEIPT_TALLY_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
# Debug output carries line numbers so classifier decisions can be traced.
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def parse_log_level(value: str | None) -> int:
    """Map a level name such as ``"debug"`` to its logging constant (INFO if unknown)."""
    if not value:
        return DEFAULT_LOG_LEVEL
    return _LEVEL_NAMES.get(value.strip().upper(), DEFAULT_LOG_LEVEL)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None, stream: TextIO | None = None) -> None:
    """Attach the namespace handler once.

    Args:
        level: Explicit level; when None the level is read from
            RECEIPT_TALLY_LOG_LEVEL.
        stream: Output stream, stderr by default.
    """
    global _handler
    if _handler is not None:
        return

    if level is None:
        level = parse_log_level(os.environ.get(LOG_LEVEL_ENV_VAR))

    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(_formatter_for(level))

    namespace_logger = logging.getLogger(LOG_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(_handler)
    namespace_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, placed under the receipt_tally namespace."""
    configure_logging()
    if name == LOG_NAMESPACE or name.startswith(f"{LOG_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the namespace level at runtime, switching to the debug format as needed."""
    configure_logging(level)
    namespace_logger = logging.getLogger(LOG_NAMESPACE)
    namespace_logger.setLevel(level)
    for handler in namespace_logger.handlers:
        handler.setFormatter(_formatter_for(level))
