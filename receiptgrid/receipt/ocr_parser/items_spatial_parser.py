"""Spatial (bbox-based) receipt line item extraction."""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from receiptgrid.domain.document import Word
from receiptgrid.domain.receipt import LineItem, LineItemsResult, TableColumn

from ..extraction_config import DEFAULT_EXTRACTION_CONFIG, LineItemConfig, TableConfig
from ..geometry import centroid, rightmost_x
from ..line_grouping import group_words_into_lines, line_text
from .common import (
    _contains_keyword,
    _is_price_token,
    _min_confidence,
    _parse_amount,
    _small_integer,
)
from .table_structure import detect_table_structure

logger = logging.getLogger(__name__)


def _is_candidate_item_line(line: Sequence[Word], config: LineItemConfig) -> bool:
    """Return True for lines that may hold an item (not headers, not totals)."""
    if len(line) < config.min_tokens:
        return False
    text = line_text(line).upper()
    if _contains_keyword(text, config.header_keywords):
        return False
    if _contains_keyword(text, config.summary_keywords):
        return False
    return any(_is_price_token(w) for w in line)


def _line_centroid(line: Sequence[Word]) -> tuple[float, float]:
    points = [centroid(w.bounding_polygon) for w in line]
    return (
        sum(x for x, _ in points) / len(points),
        sum(y for _, y in points) / len(points),
    )


def _parse_line_item(line: Sequence[Word], config: LineItemConfig) -> LineItem | None:
    """
    Parse one reading line into a LineItem.

    The rightmost price is the line total; a second price to its left is
    read as the unit price. Bare integers below ``max_quantity`` are
    quantity candidates and never part of the description.
    """
    price_words = [w for w in line if _is_price_token(w)]
    if not price_words:
        return None

    price_word = price_words[-1]
    total_price = _parse_amount(price_word.text)
    if total_price is None:
        return None
    unit_price = _parse_amount(price_words[-2].text) if len(price_words) >= 2 else None

    quantity_values: list[int] = []
    description_words: list[Word] = []
    for word in line:
        if _is_price_token(word):
            continue
        value = _small_integer(word, config.max_quantity)
        if value is not None:
            quantity_values.append(value)
            continue
        description_words.append(word)

    description = line_text(description_words).strip()
    if not description:
        logger.debug("Rejecting line without description: %r", line_text(line))
        return None

    quantity = quantity_values[0] if quantity_values and quantity_values[0] > 0 else None

    # Boost confidence for well-structured items
    confidence = _min_confidence(line)
    if len(description) > config.min_description_length and total_price > 0:
        confidence *= config.description_boost
    if quantity is not None:
        confidence *= config.quantity_boost

    return LineItem(
        description=description,
        total_price=total_price,
        confidence=min(confidence, config.confidence_cap),
        position=_line_centroid(line),
        raw_text=line_text(line),
        quantity=quantity,
        unit_price=unit_price,
        price_x=rightmost_x(price_word.bounding_polygon),
    )


def _extract_line_items(
    words: Iterable[Word],
    config: LineItemConfig = DEFAULT_EXTRACTION_CONFIG.line_items,
    table_structure: Sequence[TableColumn] | None = None,
    table_config: TableConfig = DEFAULT_EXTRACTION_CONFIG.table,
) -> LineItemsResult:
    """
    Extract itemized entries using line grouping.

    Strategy:
    1. Keep words at or above ``min_confidence`` and group them into lines
    2. Drop short lines, column headers and summary (total/tax) lines
    3. Keep lines with at least one price and parse each into an item

    The detected table structure is returned alongside for diagnostics; it
    does not decide which lines become items.
    """
    filtered = [w for w in words if w.confidence >= config.min_confidence]
    if table_structure is None:
        table_structure = detect_table_structure(filtered, table_config)

    lines = group_words_into_lines(filtered, config.line_tolerance)
    item_lines = [line for line in lines if _is_candidate_item_line(line, config)]
    logger.debug("Found %d potential item lines out of %d lines", len(item_lines), len(lines))

    items: list[LineItem] = []
    for line in item_lines:
        item = _parse_line_item(line, config)
        if item is not None:
            items.append(item)

    confidence = sum(item.confidence for item in items) / len(items) if items else 0.0
    items_sum = sum((item.total_price for item in items), Decimal("0.00"))
    return LineItemsResult(
        items=tuple(items),
        table_structure=tuple(table_structure),
        confidence=confidence,
        items_sum=items_sum,
    )
