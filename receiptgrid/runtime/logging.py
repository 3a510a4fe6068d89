"""Logging setup for the receiptgrid namespace.

Pure modules (receipt/, domain/) call ``logging.getLogger(__name__)`` and
never install handlers; their records flow to the ``receiptgrid`` logger
configured here. Runtime and CLI code use ``get_logger``.

The level comes from, in order: an explicit argument (the CLI's
``--log-level``), the RECEIPTGRID_LOG_LEVEL environment variable, INFO.
At DEBUG the format adds line numbers.
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "receiptgrid"
LOG_LEVEL_ENV_VAR = "RECEIPTGRID_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOG_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def resolve_log_level(level: int | str | None = None) -> int:
    """
    Turn a level name or number into a logging level.

    ``None`` reads RECEIPTGRID_LOG_LEVEL; an unset or unknown environment
    value falls back to INFO. An unknown explicit name raises ValueError.
    """
    if isinstance(level, int):
        return level
    if level is None:
        return LOG_LEVEL_NAMES.get(os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper(), DEFAULT_LOG_LEVEL)
    try:
        return LOG_LEVEL_NAMES[level.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | str | None = None) -> None:
    """Install the stderr handler once; an explicit level also applies on later calls."""
    global _handler

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        namespace_logger.addHandler(_handler)
        namespace_logger.propagate = False
    elif level is None:
        return

    set_log_level(resolve_log_level(level))


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the receiptgrid namespace, configuring logging on first use."""
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> None:
    """Change the namespace level at runtime, switching formats to and from DEBUG."""
    resolved = resolve_log_level(level)
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    for handler in namespace_logger.handlers:
        handler.setFormatter(_formatter_for(resolved))
