"""Date helpers for receipt parsing."""

import re
from datetime import date

_MONTH_MAP = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_NUMERIC_DATE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2}|\d{4})$")
_MONTH_NAME_DATE = re.compile(r"^([A-Za-z]{3})[A-Za-z]*\.?\s+(\d{1,2}),?\s+(\d{4})$")


def placeholder_receipt_date(today: date | None = None) -> date:
    """Return the date reported when no real receipt date was found."""
    return today if today is not None else date.today()


def _expand_two_digit_year(year: int) -> int:
    # Map 2-digit years to 2000s/1900s
    return 2000 + year if year <= 69 else 1900 + year


def parse_receipt_date(text: str) -> date | None:
    """
    Parse a matched date string into a calendar date.

    Numeric dates are read month-first (North America). Returns None for
    text that does not form a valid calendar date.
    """
    text = text.strip()
    try:
        match = _NUMERIC_DATE.match(text)
        if match:
            month, day, year = (int(g) for g in match.groups())
            if year < 100:
                year = _expand_two_digit_year(year)
            return date(year, month, day)

        match = _MONTH_NAME_DATE.match(text)
        if match:
            month = _MONTH_MAP.get(match.group(1).lower())
            if month is None:
                return None
            return date(int(match.group(3)), month, int(match.group(2)))
    except ValueError:
        return None
    return None
