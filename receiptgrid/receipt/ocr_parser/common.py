"""Shared token patterns and helpers for spatial receipt parsing."""

import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from receiptgrid.domain.document import Word

# Price-like token used for line items and column detection, e.g. "12.99", "$12.99", "12.99ea"
PRICE_PATTERN = re.compile(r"\d+\.\d{2}")

# Price-like token used for totals; captures the numeric part
AMOUNT_PATTERN = re.compile(r"\$?(\d+\.\d{2})")

# Bare integer token, e.g. a quantity column value
BARE_INTEGER_PATTERN = re.compile(r"^\d+$")

# Alphabetic content for description-like tokens
ALPHA_PATTERN = re.compile(r"[a-zA-Z]")

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Date token patterns, tried in order
DATE_PATTERNS = (
    # 01/15/2024, 1-15-24
    re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}"),
    # Jan 15, 2024
    re.compile(r"(?:" + "|".join(MONTH_NAMES) + r")\s\d{1,2},\s\d{4}", re.IGNORECASE),
    # 01/15/24
    re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2}"),
)

MONTH_PREFIX_PATTERN = re.compile(r"^(?:" + "|".join(MONTH_NAMES) + r")", re.IGNORECASE)


def _parse_amount(text: str) -> Decimal | None:
    """Return the first amount in text (``$`` optional), or None."""
    match = AMOUNT_PATTERN.search(text)
    if not match:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def _is_price_token(word: Word) -> bool:
    return PRICE_PATTERN.search(word.text) is not None


def _small_integer(word: Word, max_value: int) -> int | None:
    """Return the token's value if it is a bare integer below max_value."""
    text = word.text.strip()
    if not BARE_INTEGER_PATTERN.match(text):
        return None
    value = int(text)
    return value if value < max_value else None


def _is_text_token(word: Word, min_length: int) -> bool:
    return ALPHA_PATTERN.search(word.text) is not None and len(word.text) >= min_length


def _contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test against a keyword set."""
    upper = text.upper()
    return any(keyword.upper() in upper for keyword in keywords)


def _match_date_text(text: str) -> str | None:
    """Return the first date-looking substring of text, or None."""
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def _min_confidence(words: Iterable[Word]) -> float:
    return min((w.confidence for w in words), default=0.0)
