"""Confidence aggregation and spatial cross-validation of extracted fields."""

import logging
from collections.abc import Sequence
from decimal import Decimal

from receiptgrid.domain.receipt import LineItem, SpatialValidation, TotalCorrection

from .extraction_config import DEFAULT_EXTRACTION_CONFIG, ConfidenceWeights, ValidationConfig

logger = logging.getLogger(__name__)

# Common OCR digit confusions, used to suggest a corrected total
OCR_DIGIT_CONFUSIONS: dict[str, tuple[str, ...]] = {
    "0": ("8", "6"),
    "1": ("7",),
    "2": ("7",),
    "3": ("8", "5"),
    "4": ("9", "1"),
    "5": ("6", "8", "3"),
    "6": ("8", "0", "5"),
    "7": ("1", "2"),
    "8": ("0", "6", "3"),
    "9": ("4", "8"),
}

CORRECTION_RELATIVE_WINDOW = Decimal("0.05")
CORRECTION_ABSOLUTE_WINDOW = Decimal("2.00")
CORRECTION_MIN_DIFFERENCE = Decimal("0.01")
DIGIT_VARIATION_TOLERANCE = Decimal("0.50")


def clamp01(value: float) -> float:
    return 0.0 if value < 0.0 else 1.0 if value > 1.0 else value


def overall_confidence(
    merchant: float,
    total: float,
    date: float,
    line_items: float,
    weights: ConfidenceWeights = DEFAULT_EXTRACTION_CONFIG.weights,
) -> float:
    """Combine field confidences with fixed weights, clamped into [0, 1]."""
    return clamp01(
        merchant * weights.merchant + total * weights.total + date * weights.date + line_items * weights.line_items
    )


def _items_sum(items: Sequence[LineItem]) -> Decimal:
    return sum((item.total_price for item in items), Decimal("0.00"))


def is_mathematically_consistent(
    items: Sequence[LineItem],
    total: Decimal,
    config: ValidationConfig = DEFAULT_EXTRACTION_CONFIG.validation,
) -> bool:
    """
    Return True when line items sum to the total within tolerance.

    Tolerance is the larger of ``relative_tolerance`` of the total and
    ``absolute_tolerance``. Without any line item there is nothing to check
    and the result is False.
    """
    if not items:
        return False
    items_sum = _items_sum(items)
    tolerance = max(total * Decimal(str(config.relative_tolerance)), Decimal(str(config.absolute_tolerance)))
    consistent = abs(items_sum - total) <= tolerance
    if consistent:
        logger.debug("Mathematical consistency: items sum %s ~ total %s", items_sum, total)
    else:
        logger.debug("Mathematical inconsistency: items sum %s, total %s", items_sum, total)
    return consistent


def prices_aligned(
    items: Sequence[LineItem],
    config: ValidationConfig = DEFAULT_EXTRACTION_CONFIG.validation,
) -> bool:
    """Return True if every item's price x-position is near the mean price column."""
    if len(items) < 2:
        return True
    positions = [item.price_x for item in items]
    mean_x = sum(positions) / len(positions)
    return max(abs(x - mean_x) for x in positions) < config.price_alignment_tolerance


def vertically_ordered(
    items: Sequence[LineItem],
    config: ValidationConfig = DEFAULT_EXTRACTION_CONFIG.validation,
) -> bool:
    """Return True if items run top to bottom, allowing small vertical jitter."""
    ys = [item.position[1] for item in items]
    return all(y >= previous - config.vertical_jitter for previous, y in zip(ys, ys[1:]))


def validate_spatial_consistency(
    items: Sequence[LineItem],
    total: Decimal,
    config: ValidationConfig = DEFAULT_EXTRACTION_CONFIG.validation,
) -> SpatialValidation:
    return SpatialValidation(
        mathematical_consistency=is_mathematically_consistent(items, total, config),
        prices_aligned=prices_aligned(items, config),
        vertically_ordered=vertically_ordered(items, config),
    )


def _ocr_variations(amount: Decimal) -> list[Decimal]:
    """Amounts reachable by swapping one commonly confused digit in the dollar part."""
    dollars, cents = f"{amount:.2f}".split(".")
    variations: list[Decimal] = []
    for i, digit in enumerate(dollars):
        for alternative in OCR_DIGIT_CONFUSIONS.get(digit, ()):
            candidate = Decimal(f"{dollars[:i]}{alternative}{dollars[i + 1:]}.{cents}")
            if candidate > 0:
                variations.append(candidate)
    return variations


def suggest_total_correction(items: Sequence[LineItem], total: Decimal) -> TotalCorrection | None:
    """
    Suggest a corrected total when it disagrees slightly with the line items.

    Only differences that look like OCR errors are considered. With two or
    more items the items sum is preferred; otherwise a single-digit OCR
    confusion of the total that lands near the items sum is suggested.
    The suggestion is advisory and never replaces the extracted total.
    """
    if not items:
        return None

    items_sum = _items_sum(items)
    difference = abs(items_sum - total)
    window = max(total * CORRECTION_RELATIVE_WINDOW, CORRECTION_ABSOLUTE_WINDOW)
    if not (CORRECTION_MIN_DIFFERENCE < difference < window):
        return None

    if items_sum > 0 and len(items) >= 2:
        return TotalCorrection(
            corrected_total=items_sum,
            reason=f"Adjusted total from ${total:.2f} to ${items_sum:.2f} to match line items",
        )

    for candidate in _ocr_variations(total):
        if abs(items_sum - candidate) < DIGIT_VARIATION_TOLERANCE:
            return TotalCorrection(
                corrected_total=candidate,
                reason=f"Corrected total OCR error: ${total:.2f} -> ${candidate:.2f}",
            )
    return None
