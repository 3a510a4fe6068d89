"""Merchant/total/date extraction from spatial OCR data."""

import logging
import re
from collections.abc import Iterator, Sequence
from datetime import date
from decimal import Decimal

from receiptgrid.domain.document import VisionDocument, Word
from receiptgrid.domain.receipt import DateField, MerchantField, TotalField

from ..date_utils import parse_receipt_date, placeholder_receipt_date
from ..extraction_config import (
    DEFAULT_EXTRACTION_CONFIG,
    DateConfig,
    GeometryConfig,
    MerchantConfig,
    TotalConfig,
)
from ..geometry import centroid_distance, font_size, is_same_line, rightmost_x
from ..vision_normalization import top_blocks
from .common import (
    MONTH_PREFIX_PATTERN,
    _contains_keyword,
    _match_date_text,
    _min_confidence,
    _parse_amount,
)

logger = logging.getLogger(__name__)

PHONE_NUMBER_PATTERN = re.compile(r"\d{10,}")
STREET_ADDRESS_PATTERN = re.compile(
    r"\d+\s+\w+\s+(?:st|ave|blvd|rd|street|avenue|boulevard|road)\b\.?",
    re.IGNORECASE,
)


def _clean_merchant_name(text: str) -> str:
    """Keep the first line of a block and drop phone numbers and street addresses."""
    first_line = text.split("\n", 1)[0]
    cleaned = PHONE_NUMBER_PATTERN.sub("", first_line)
    cleaned = STREET_ADDRESS_PATTERN.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def _extract_merchant(
    document: VisionDocument,
    config: MerchantConfig = DEFAULT_EXTRACTION_CONFIG.merchant,
) -> MerchantField:
    """
    Extract merchant name from the tallest block in the top of page one.

    Bounding-box height stands in for font size, so a tall multi-line block
    can win over a shorter single line printed in a larger font.
    """
    largest_block = None
    largest_font_size = 0
    for block in top_blocks(document, config.top_region_ratio):
        size = font_size(block.bounding_polygon)
        if size > largest_font_size:
            largest_font_size = size
            largest_block = block

    if largest_block is None:
        logger.debug("No merchant candidate in top %.0f%% of page", config.top_region_ratio * 100)
        return MerchantField(merchant="", confidence=0.0)

    merchant = _clean_merchant_name(largest_block.text)
    # Slight penalty for text cleaning
    return MerchantField(merchant=merchant, confidence=largest_block.confidence * config.confidence_factor)


def _find_largest_amount(words: Sequence[Word]) -> tuple[Decimal, Word | None]:
    largest_amount = Decimal("0")
    best_word = None
    for word in words:
        amount = _parse_amount(word.text)
        if amount is not None and amount > largest_amount:
            largest_amount = amount
            best_word = word
    return largest_amount, best_word


def _extract_total(
    words: Sequence[Word],
    config: TotalConfig = DEFAULT_EXTRACTION_CONFIG.total,
    geometry: GeometryConfig = DEFAULT_EXTRACTION_CONFIG.geometry,
) -> TotalField:
    """
    Extract the total amount.

    Strategy:
    1. Take the first word (document order) containing a total keyword and
       pick the rightmost amount on the same line.
    2. Otherwise take the largest amount anywhere on the page, with a lower
       confidence (lower still when a keyword was seen but had no amount).

    Only the first keyword is considered, so a SUBTOTAL printed above TOTAL
    wins.
    """
    keyword_word = next((w for w in words if _contains_keyword(w.text, config.keywords)), None)

    if keyword_word is not None:
        best_price: Word | None = None
        best_amount: Decimal | None = None
        for word in words:
            amount = _parse_amount(word.text)
            if amount is None:
                continue
            if not is_same_line(word.bounding_polygon, keyword_word.bounding_polygon, geometry.same_line_tolerance):
                continue
            if best_price is None or rightmost_x(word.bounding_polygon) > rightmost_x(best_price.bounding_polygon):
                best_price = word
                best_amount = amount

        if best_price is not None and best_amount is not None:
            confidence = min(keyword_word.confidence, best_price.confidence) * config.confidence_boost
            logger.debug("Total %s found beside keyword %r", best_amount, keyword_word.text)
            return TotalField(
                amount=best_amount,
                confidence=min(confidence, config.confidence_cap),
                method="keyword",
            )
        logger.debug("Keyword %r has no amount on its line; using largest amount", keyword_word.text)

    amount, best_word = _find_largest_amount(words)
    if best_word is None:
        return TotalField(amount=Decimal("0.00"), confidence=0.0, method="none")

    confidence = best_word.confidence * config.fallback_factor
    method = "largest_amount"
    if keyword_word is not None:
        confidence *= config.keyword_miss_factor
        method = "keyword_fallback"
    return TotalField(amount=amount, confidence=confidence, method=method)


def _date_candidates(words: Sequence[Word]) -> Iterator[tuple[Word, str, float]]:
    """
    Yield (anchor word, text, confidence) for each date-looking token.

    Month-name dates ("Jan 5, 2024") are split across several OCR tokens,
    so a month-prefixed word is also tried joined with the next two words.
    """
    for index, word in enumerate(words):
        matched = _match_date_text(word.text)
        if matched:
            yield word, matched, word.confidence
            continue
        if MONTH_PREFIX_PATTERN.match(word.text):
            phrase_words = words[index : index + 3]
            matched = _match_date_text(" ".join(w.text for w in phrase_words))
            if matched:
                yield word, matched, _min_confidence(phrase_words)


def _extract_date(
    words: Sequence[Word],
    config: DateConfig = DEFAULT_EXTRACTION_CONFIG.date,
    today: date | None = None,
) -> DateField:
    """
    Extract the purchase date.

    Dates near a DATE/ISSUED/PURCHASE keyword win; otherwise the first date
    that is not beside a RETURN/EXPIRE/VALID notice. When nothing parses,
    today's date is reported with confidence 0.
    """
    candidates = list(_date_candidates(words))

    for keyword_word in words:
        if not _contains_keyword(keyword_word.text, config.keywords):
            continue
        for word, text, confidence in candidates:
            distance = centroid_distance(keyword_word.bounding_polygon, word.bounding_polygon)
            if distance <= config.keyword_radius:
                return _date_field(text, confidence * config.keyword_factor, "keyword", today)

    exclusion_words = [w for w in words if _contains_keyword(w.text, config.exclude_keywords)]
    for word, text, confidence in candidates:
        near_exclusion = any(
            centroid_distance(word.bounding_polygon, excluded.bounding_polygon) < config.exclude_radius
            for excluded in exclusion_words
        )
        if near_exclusion:
            logger.debug("Skipping date %r near exclusion keyword", text)
            continue
        return _date_field(text, confidence * config.fallback_factor, "fallback", today)

    return DateField(date=placeholder_receipt_date(today), confidence=0.0, method="placeholder")


def _date_field(text: str, confidence: float, method: str, today: date | None) -> DateField:
    parsed = parse_receipt_date(text)
    if parsed is None:
        logger.debug("Unparsable date text %r; using placeholder", text)
        return DateField(date=placeholder_receipt_date(today), confidence=0.0, method="placeholder", raw_text=text)
    return DateField(date=parsed, confidence=confidence, method=method, raw_text=text)
