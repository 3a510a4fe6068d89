"""Runtime infrastructure for receiptgrid.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Extraction config loading via load_extraction_config()

The HTTP server lives in receiptgrid.runtime.extraction_server and is
imported on demand so that FastAPI is only loaded when serving.

Usage:
    from receiptgrid.runtime import get_logger, load_extraction_config

    logger = get_logger(__name__)
    config = load_extraction_config()
"""

from receiptgrid.runtime.extraction_config import (
    CONFIG_ENV_VAR,
    load_extraction_config,
    resolve_config_path,
)
from receiptgrid.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    LOG_LEVEL_NAMES,
    configure_logging,
    get_logger,
    resolve_log_level,
    set_log_level,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    "LOG_LEVEL_NAMES",
    "resolve_log_level",
    # Config
    "CONFIG_ENV_VAR",
    "load_extraction_config",
    "resolve_config_path",
]
