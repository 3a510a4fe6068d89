"""Tests for merchant, total and date extraction."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from receiptgrid.domain.document import Block, BoundingPolygon, Page, Paragraph, VisionDocument, Word
from receiptgrid.receipt.date_utils import parse_receipt_date
from receiptgrid.receipt.ocr_parser import _extract_date, _extract_merchant, _extract_total
from receiptgrid.receipt.ocr_parser.fields_parser import _clean_merchant_name
from receiptgrid.receipt.vision_normalization import normalize_vision_response

TODAY = date(2026, 3, 1)


def _word(text: str, x: int, y: int, confidence: float = 0.9, width: int = 60) -> Word:
    return Word(text=text, bounding_polygon=BoundingPolygon.from_rect(x, y, x + width, y + 20), confidence=confidence)


# Merchant


def test_merchant_is_tallest_top_block(grocery_payload) -> None:
    merchant = _extract_merchant(normalize_vision_response(grocery_payload))

    assert merchant.merchant == "ACME MARKET"
    assert merchant.confidence == pytest.approx(0.95 * 0.9)


def test_merchant_ignores_blocks_below_top_region(make_vision_payload) -> None:
    payload = make_vision_payload([([("Thanks", 50, 600, 200, 700, 0.9)], 0.9)])

    merchant = _extract_merchant(normalize_vision_response(payload))

    assert merchant.merchant == ""
    assert merchant.confidence == 0.0


def test_merchant_name_drops_phone_and_address() -> None:
    assert _clean_merchant_name("ACME 4165551234 MARKET\nsecond line") == "ACME MARKET"
    assert _clean_merchant_name("Corner Deli 42 King St") == "Corner Deli"


def test_merchant_keeps_first_line_of_multiline_block() -> None:
    def _paragraph(text: str, y: int) -> Paragraph:
        box = BoundingPolygon.from_rect(50, y, 300, y + 20)
        return Paragraph(text=text, bounding_polygon=box, confidence=0.9, words=(Word(text, box, 0.9),))

    block = Block(
        text="ACME HARDWARE\n123 Main St\n555-123-4567",
        bounding_polygon=BoundingPolygon.from_rect(50, 10, 300, 90),
        confidence=0.9,
        paragraphs=(_paragraph("ACME HARDWARE", 10), _paragraph("123 Main St", 40), _paragraph("555-123-4567", 70)),
    )
    document = VisionDocument(pages=(Page(width=400, height=800, confidence=0.9, blocks=(block,)),))

    assert _extract_merchant(document).merchant == "ACME HARDWARE"


# Total


def test_total_keyword_with_amount_on_same_line() -> None:
    words = [_word("TOTAL", 50, 400, 0.9), _word("$42.50", 400, 402, 0.95)]

    total = _extract_total(words)

    assert total.amount == Decimal("42.50")
    assert total.confidence == pytest.approx(0.95)
    assert total.method == "keyword"


def test_total_keyword_picks_rightmost_amount() -> None:
    words = [_word("TOTAL", 50, 400, 0.7), _word("3.00", 250, 400, 0.7), _word("18.40", 400, 400, 0.7)]

    total = _extract_total(words)

    assert total.amount == Decimal("18.40")
    assert total.confidence == pytest.approx(0.7 * 1.2)


def test_total_without_keyword_uses_largest_amount() -> None:
    words = [_word("12.00", 400, 100), _word("99.99", 400, 140), _word("5.00", 400, 180)]

    total = _extract_total(words)

    assert total.amount == Decimal("99.99")
    assert total.confidence == pytest.approx(0.9 * 0.7)
    assert total.confidence <= 0.7 * 0.9
    assert total.method == "largest_amount"


def test_total_keyword_without_amount_is_penalized() -> None:
    words = [_word("TOTAL", 50, 100), _word("$50.00", 400, 300)]

    total = _extract_total(words)

    assert total.amount == Decimal("50.00")
    assert total.confidence == pytest.approx(0.9 * 0.7 * 0.6)
    assert total.method == "keyword_fallback"


def test_first_keyword_wins_even_for_subtotal() -> None:
    words = [
        _word("SUBTOTAL", 50, 100),
        _word("40.00", 400, 100),
        _word("TOTAL", 50, 200),
        _word("45.20", 400, 200),
    ]

    assert _extract_total(words).amount == Decimal("40.00")


def test_no_amount_anywhere() -> None:
    total = _extract_total([_word("hello", 0, 0)])

    assert total.amount == Decimal("0.00")
    assert total.confidence == 0.0
    assert total.method == "none"


# Date


def test_date_near_keyword() -> None:
    words = [_word("DATE:", 50, 500), _word("01/15/2024", 150, 500, 0.9, width=120)]

    result = _extract_date(words, today=TODAY)

    assert result.date == date(2024, 1, 15)
    assert result.confidence == pytest.approx(0.9 * 0.9)
    assert result.method == "keyword"
    assert result.raw_text == "01/15/2024"


def test_date_fallback_skips_return_notice() -> None:
    words = [
        _word("RETURN", 50, 100),
        _word("02/15/2024", 100, 100, width=120),
        _word("03/01/2024", 300, 600, 0.8, width=120),
    ]

    result = _extract_date(words, today=TODAY)

    assert result.date == date(2024, 3, 1)
    assert result.confidence == pytest.approx(0.8 * 0.7)
    assert result.method == "fallback"


def test_date_exactly_at_keyword_radius_counts_as_keyword() -> None:
    # Centroids (80, 510) and (230, 510): 150px apart
    words = [_word("DATE", 50, 500), _word("01/15/2024", 170, 500, width=120)]

    result = _extract_date(words, today=TODAY)

    assert result.method == "keyword"
    assert result.confidence == pytest.approx(0.9 * 0.9)


def test_date_beyond_keyword_radius_falls_back() -> None:
    words = [_word("DATE", 50, 500), _word("01/15/2024", 171, 500, width=120)]

    result = _extract_date(words, today=TODAY)

    assert result.date == date(2024, 1, 15)
    assert result.method == "fallback"
    assert result.confidence == pytest.approx(0.9 * 0.7)


def test_date_exactly_at_exclusion_radius_is_accepted() -> None:
    # Centroids (80, 110) and (180, 110): 100px apart, exclusion is strict
    words = [_word("RETURN", 50, 100), _word("02/15/2024", 120, 100, width=120)]

    result = _extract_date(words, today=TODAY)

    assert result.date == date(2024, 2, 15)
    assert result.method == "fallback"


def test_date_inside_exclusion_radius_is_skipped() -> None:
    words = [_word("RETURN", 50, 100), _word("02/15/2024", 119, 100, width=120)]

    assert _extract_date(words, today=TODAY).is_placeholder


def test_month_name_date_spans_words() -> None:
    words = [_word("Jan", 50, 100, 0.95), _word("5,", 120, 100, 0.85), _word("2024", 170, 100, 0.9)]

    result = _extract_date(words, today=TODAY)

    assert result.date == date(2024, 1, 5)
    assert result.confidence == pytest.approx(0.85 * 0.7)


def test_no_date_returns_placeholder() -> None:
    result = _extract_date([_word("hello", 0, 0)], today=TODAY)

    assert result.date == TODAY
    assert result.confidence == 0.0
    assert result.is_placeholder
    assert result.method == "placeholder"


def test_unparsable_date_returns_placeholder() -> None:
    result = _extract_date([_word("13/45/2024", 0, 0, width=120)], today=TODAY)

    assert result.date == TODAY
    assert result.confidence == 0.0
    assert result.raw_text == "13/45/2024"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("01/15/2024", date(2024, 1, 15)),
        ("1-5-24", date(2024, 1, 5)),
        ("12/31/99", date(1999, 12, 31)),
        ("Jan 15, 2024", date(2024, 1, 15)),
        ("02/30/2024", None),
        ("01/15/202", None),
        ("Foo 15, 2024", None),
    ],
)
def test_parse_receipt_date(text: str, expected: date | None) -> None:
    assert parse_receipt_date(text) == expected
