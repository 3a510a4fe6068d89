"""Tunable constants for spatial receipt extraction.

Every threshold, multiplier and keyword list used by the extractors lives
here so that each can be overridden from a TOML file (see
``receiptgrid.runtime.extraction_config``) and tested in isolation.

Distances are in image pixels. Multipliers apply to provider confidences.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryConfig:
    same_line_tolerance: float = 10.0


@dataclass(frozen=True)
class TableConfig:
    grid_size: int = 20
    sample_size: int = 10
    min_column_confidence: float = 0.3
    total_price_min_x: int = 300  # Prices usually sit on the right
    quantity_max_x: int = 200  # Quantities usually sit on the left
    range_left_pad: int = 20
    range_right_pad: int = 100
    max_quantity: int = 100
    min_text_length: int = 3


@dataclass(frozen=True)
class MerchantConfig:
    top_region_ratio: float = 0.2
    confidence_factor: float = 0.9


@dataclass(frozen=True)
class TotalConfig:
    keywords: tuple[str, ...] = ("TOTAL", "GRAND TOTAL", "AMOUNT DUE", "BALANCE", "CHARGE")
    confidence_boost: float = 1.2
    confidence_cap: float = 0.95
    fallback_factor: float = 0.7
    # Applied on top of fallback_factor when a keyword had no co-line price.
    keyword_miss_factor: float = 0.6


@dataclass(frozen=True)
class DateConfig:
    keywords: tuple[str, ...] = ("DATE", "ISSUED", "PURCHASE")
    exclude_keywords: tuple[str, ...] = ("RETURN", "EXPIRE", "VALID")
    keyword_radius: float = 150.0
    exclude_radius: float = 100.0
    keyword_factor: float = 0.9
    fallback_factor: float = 0.7


@dataclass(frozen=True)
class LineItemConfig:
    min_confidence: float = 0.4
    line_tolerance: float = 12.0
    min_tokens: int = 2
    header_keywords: tuple[str, ...] = ("DESCRIPTION", "ITEM", "QTY", "PRICE")
    summary_keywords: tuple[str, ...] = ("TOTAL", "SUBTOTAL", "TAX", "AMOUNT DUE")
    max_quantity: int = 100
    min_description_length: int = 3  # Boost applies when strictly longer
    description_boost: float = 1.2
    quantity_boost: float = 1.1
    confidence_cap: float = 0.95


@dataclass(frozen=True)
class ValidationConfig:
    relative_tolerance: float = 0.10
    absolute_tolerance: float = 5.00
    price_alignment_tolerance: float = 50.0
    vertical_jitter: float = 10.0


@dataclass(frozen=True)
class ConfidenceWeights:
    """Weights for the overall score. They sum to 1."""

    merchant: float = 0.25
    total: float = 0.35
    date: float = 0.15
    line_items: float = 0.25


@dataclass(frozen=True)
class ExtractionConfig:
    # Minimum word confidence for the total and date extractors.
    field_min_confidence: float = 0.7
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    table: TableConfig = field(default_factory=TableConfig)
    merchant: MerchantConfig = field(default_factory=MerchantConfig)
    total: TotalConfig = field(default_factory=TotalConfig)
    date: DateConfig = field(default_factory=DateConfig)
    line_items: LineItemConfig = field(default_factory=LineItemConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    weights: ConfidenceWeights = field(default_factory=ConfidenceWeights)


DEFAULT_EXTRACTION_CONFIG = ExtractionConfig()


# Values that divide or bound a search
_POSITIVE_FIELDS = frozenset(
    {
        "grid_size",
        "sample_size",
        "max_quantity",
        "same_line_tolerance",
        "line_tolerance",
        "keyword_radius",
        "exclude_radius",
        "price_alignment_tolerance",
    }
)
_NON_NEGATIVE_FIELDS = frozenset({"relative_tolerance", "absolute_tolerance", "vertical_jitter", "min_tokens"})


def _check_range(where: str, name: str, value: float) -> None:
    if name in _POSITIVE_FIELDS and value <= 0:
        raise ValueError(f"{where} must be positive, got {value}")
    if name in _NON_NEGATIVE_FIELDS and value < 0:
        raise ValueError(f"{where} must not be negative, got {value}")


def _coerce_value(section: str, name: str, current: Any, raw: Any) -> Any:
    """Coerce a raw TOML value to the type of the default it replaces."""
    where = f"{section}.{name}" if section else name
    if isinstance(current, tuple):
        if not isinstance(raw, (list, tuple)) or not all(isinstance(item, str) for item in raw):
            raise ValueError(f"{where} must be a list of strings")
        return tuple(item.upper() for item in raw)
    if isinstance(raw, bool):
        raise ValueError(f"{where} must be a number, got a boolean")
    if isinstance(current, int):
        if not isinstance(raw, int):
            raise ValueError(f"{where} must be an integer")
        _check_range(where, name, raw)
        return raw
    if isinstance(current, float):
        if not isinstance(raw, (int, float)):
            raise ValueError(f"{where} must be a number")
        value = float(raw)
        if not math.isfinite(value):
            raise ValueError(f"{where} must be finite")
        _check_range(where, name, value)
        return value
    raise ValueError(f"{where} has unsupported type {type(current).__name__}")


def _overlay(section: str, base: Any, overrides: Mapping[str, Any]) -> Any:
    known = {f.name: f for f in fields(base)}
    changes: dict[str, Any] = {}
    for key, raw in overrides.items():
        if key not in known:
            logger.warning("Ignoring unknown extraction config key: %s", f"{section}.{key}" if section else key)
            continue
        current = getattr(base, key)
        if hasattr(current, "__dataclass_fields__"):
            if not isinstance(raw, Mapping):
                raise ValueError(f"[{key}] must be a table")
            changes[key] = _overlay(key, current, raw)
        else:
            changes[key] = _coerce_value(section, key, current, raw)
    return replace(base, **changes)


def build_extraction_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    base: ExtractionConfig = DEFAULT_EXTRACTION_CONFIG,
) -> ExtractionConfig:
    """Overlay a parsed mapping (e.g. TOML) onto the default configuration.

    Unknown keys are logged and ignored; badly typed values raise ValueError.
    """
    if not overrides:
        return base
    return _overlay("", base, overrides)
