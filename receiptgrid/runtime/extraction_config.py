"""Runtime loader for extraction thresholds and weights."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from receiptgrid.receipt.extraction_config import ExtractionConfig, build_extraction_config
from receiptgrid.runtime.logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "RECEIPTGRID_CONFIG"


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def resolve_config_path(config_path: str | None = None) -> Path | None:
    """Return the config file path from the argument or RECEIPTGRID_CONFIG, if any."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(env_path) if env_path else None


def load_extraction_config(config_path: str | None = None) -> ExtractionConfig:
    """
    Load extraction config from TOML, overlaid on the built-in defaults.

    The path is resolved on every call, so a changed RECEIPTGRID_CONFIG is
    picked up; parsed files are cached per resolved path.

    Args:
        config_path: Optional TOML path. If None, uses RECEIPTGRID_CONFIG when set.

    Returns:
        Immutable ExtractionConfig; the defaults when no file is configured or found

    Raises:
        ValueError: if the file contains badly typed or out-of-range values
    """
    return load_extraction_config_file(resolve_config_path(config_path))


@lru_cache(maxsize=4)
def load_extraction_config_file(path: Path | None) -> ExtractionConfig:
    """Build the config for one resolved path (None means defaults)."""
    if path is None:
        return build_extraction_config()
    if not path.exists():
        logger.warning("Extraction config %s not found; using defaults", path)
        return build_extraction_config()

    logger.debug("Loading extraction config from %s", path)
    return build_extraction_config(_load_toml(path))
