"""Tests for confidence aggregation and spatial cross-validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from receiptgrid.domain.receipt import LineItem
from receiptgrid.receipt.extraction_config import ConfidenceWeights
from receiptgrid.receipt.validation import (
    clamp01,
    is_mathematically_consistent,
    overall_confidence,
    prices_aligned,
    suggest_total_correction,
    validate_spatial_consistency,
    vertically_ordered,
)


def _item(price: str, y: float = 100.0, price_x: int = 450) -> LineItem:
    return LineItem(
        description="item",
        total_price=Decimal(price),
        confidence=0.9,
        position=(200.0, y),
        raw_text=f"item {price}",
        price_x=price_x,
    )


def test_items_within_tolerance_are_consistent() -> None:
    items = [_item("20.00"), _item("21.80", y=140)]

    assert is_mathematically_consistent(items, Decimal("42.50"))


def test_items_far_from_total_are_inconsistent() -> None:
    assert not is_mathematically_consistent([_item("20.00")], Decimal("42.50"))


def test_absolute_tolerance_covers_small_totals() -> None:
    # 10% of 8.00 is 0.80, but the 5.00 floor applies
    assert is_mathematically_consistent([_item("4.00")], Decimal("8.00"))


def test_no_items_is_never_consistent() -> None:
    assert not is_mathematically_consistent([], Decimal("0.00"))
    assert not is_mathematically_consistent([], Decimal("12.00"))


def test_prices_aligned() -> None:
    assert prices_aligned([_item("1.00", price_x=400), _item("2.00", price_x=410)])
    assert not prices_aligned([_item("1.00", price_x=400), _item("2.00", price_x=520)])
    assert prices_aligned([_item("1.00")])


def test_vertically_ordered_allows_jitter() -> None:
    assert vertically_ordered([_item("1.00", y=100), _item("2.00", y=95)])
    assert not vertically_ordered([_item("1.00", y=100), _item("2.00", y=80)])
    assert vertically_ordered([])


def test_validate_spatial_consistency_combines_checks() -> None:
    items = [_item("20.00", y=100, price_x=450), _item("21.80", y=60, price_x=455)]

    validation = validate_spatial_consistency(items, Decimal("42.50"))

    assert validation.mathematical_consistency
    assert validation.prices_aligned
    assert not validation.vertically_ordered
    assert not validation.table_layout_valid


def test_overall_confidence_weights_and_clamp() -> None:
    assert overall_confidence(1.0, 1.0, 1.0, 1.0) == pytest.approx(1.0)
    assert overall_confidence(0.8, 0.6, 0.0, 0.4) == pytest.approx(0.8 * 0.25 + 0.6 * 0.35 + 0.4 * 0.25)
    assert overall_confidence(2.0, 2.0, 2.0, 2.0) == 1.0
    assert overall_confidence(1.0, 0.0, 0.0, 0.0, ConfidenceWeights(merchant=-1.0)) == 0.0


def test_clamp01() -> None:
    assert [clamp01(v) for v in (-0.5, 0.3, 1.5)] == [0.0, 0.3, 1.0]


def test_correction_prefers_items_sum_with_several_items() -> None:
    correction = suggest_total_correction([_item("20.00"), _item("21.80")], Decimal("42.50"))

    assert correction is not None
    assert correction.corrected_total == Decimal("41.80")
    assert "42.50" in correction.reason


def test_correction_uses_ocr_digit_confusion_for_single_item() -> None:
    correction = suggest_total_correction([_item("15.00")], Decimal("16.00"))

    assert correction is not None
    assert correction.corrected_total == Decimal("15.00")
    assert correction.reason == "Corrected total OCR error: $16.00 -> $15.00"


def test_no_correction_when_matching_or_far_off() -> None:
    assert suggest_total_correction([_item("20.00"), _item("22.50")], Decimal("42.50")) is None
    assert suggest_total_correction([_item("20.00"), _item("2.50")], Decimal("42.50")) is None
    assert suggest_total_correction([], Decimal("42.50")) is None
