"""Infer column bands and their semantic roles from token x-positions.

The result is advisory context for line-item extraction and diagnostics;
it never decides whether a line is accepted as an item.
"""

import logging
import math
from collections.abc import Iterable

from receiptgrid.domain.document import Word
from receiptgrid.domain.receipt import ColumnType, TableColumn

from ..extraction_config import DEFAULT_EXTRACTION_CONFIG, TableConfig
from ..geometry import leftmost_x
from .common import _is_price_token, _is_text_token, _small_integer

logger = logging.getLogger(__name__)


def _snap_to_grid(x: float, grid_size: int) -> int:
    """Round half-up to the nearest grid line."""
    return int(math.floor(x / grid_size + 0.5)) * grid_size


def _classify_bucket(bucket_x: int, sample: list[Word], config: TableConfig) -> tuple[ColumnType, float]:
    price_count = sum(1 for w in sample if _is_price_token(w))
    quantity_count = sum(1 for w in sample if _small_integer(w, config.max_quantity) is not None)
    text_count = sum(1 for w in sample if _is_text_token(w, config.min_text_length))
    size = len(sample)

    if text_count > price_count and text_count > quantity_count:
        return "description", text_count / size
    if price_count > 0 and bucket_x > config.total_price_min_x:
        return "total_price", price_count / size
    if quantity_count > 0 and bucket_x < config.quantity_max_x:
        return "quantity", quantity_count / size
    return "unit_price", price_count / size


def detect_table_structure(
    words: Iterable[Word],
    config: TableConfig = DEFAULT_EXTRACTION_CONFIG.table,
) -> tuple[TableColumn, ...]:
    """
    Bucket words by left edge and classify each bucket as a column role.

    Each bucket is judged on its first ``sample_size`` tokens; only buckets
    whose deciding ratio exceeds ``min_column_confidence`` are kept.

    Returns:
        Columns ordered left to right
    """
    buckets: dict[int, list[Word]] = {}
    for word in words:
        bucket_x = _snap_to_grid(leftmost_x(word.bounding_polygon), config.grid_size)
        buckets.setdefault(bucket_x, []).append(word)

    columns: list[TableColumn] = []
    for bucket_x in sorted(buckets):
        sample = buckets[bucket_x][: config.sample_size]
        column_type, confidence = _classify_bucket(bucket_x, sample, config)
        if confidence <= config.min_column_confidence:
            continue
        columns.append(
            TableColumn(
                type=column_type,
                x_range=(bucket_x - config.range_left_pad, bucket_x + config.range_right_pad),
                confidence=confidence,
            )
        )

    logger.debug("Detected %d table columns: %s", len(columns), [c.type for c in columns])
    return tuple(columns)
