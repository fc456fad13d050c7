"""Logging for strukscan.

Every module logs under the ``strukscan`` namespace:

    from strukscan.runtime import get_logger
    logger = get_logger(__name__)

Pure layers (``strukscan.domain``, ``strukscan.receipt``) use
``logging.getLogger(__name__)`` directly; their records land under the same
namespace once :func:`configure_logging` has attached the handler.

The level comes from ``STRUKSCAN_LOG_LEVEL`` (DEBUG, INFO, WARNING, ERROR) or
the CLI ``--log-level`` flag. Default: INFO.
"""

import logging
import os
import sys
from typing import TextIO

LOGGER_NAMESPACE = "strukscan"
LOG_LEVEL_ENV = "STRUKSCAN_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def parse_log_level(value: str | None) -> int:
    """Map a level name to a logging level; unknown or empty names give the default."""
    if not value:
        return DEFAULT_LOG_LEVEL
    return _LEVEL_NAMES.get(value.strip().upper(), DEFAULT_LOG_LEVEL)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None, stream: TextIO | None = None) -> None:
    """Attach the strukscan handler once.

    Args:
        level: Log level to use. If None, reads STRUKSCAN_LOG_LEVEL.
        stream: Output stream for the handler (default: stderr).
    """
    global _handler

    if _handler is not None:
        return

    if level is None:
        level = parse_log_level(os.environ.get(LOG_LEVEL_ENV))

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_formatter_for(level))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False

    _handler = handler


def reset_logging() -> None:
    """Detach the strukscan handler so the next call reconfigures (used by tests)."""
    global _handler

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _handler is not None:
        namespace_logger.removeHandler(_handler)
        _handler = None
    namespace_logger.setLevel(logging.NOTSET)
    namespace_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the strukscan namespace.

    Args:
        name: Module name, typically __name__
    """
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> None:
    """Change the namespace log level at runtime.

    Args:
        level: A logging level or a level name such as "DEBUG".
    """
    if isinstance(level, str):
        level = parse_log_level(level)

    configure_logging(level)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setFormatter(_formatter_for(level))
