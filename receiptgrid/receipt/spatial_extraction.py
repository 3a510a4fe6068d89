"""Turn a Vision OCR payload into a structured ReceiptExtraction."""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from receiptgrid.domain.document import VisionDocument
from receiptgrid.domain.receipt import ReceiptExtraction

from .extraction_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig
from .ocr_parser import (
    _extract_date,
    _extract_line_items,
    _extract_merchant,
    _extract_total,
    detect_table_structure,
)
from .validation import overall_confidence, suggest_total_correction, validate_spatial_consistency
from .vision_normalization import iter_words, normalize_vision_response

logger = logging.getLogger(__name__)


def extract_from_document(
    document: VisionDocument,
    *,
    config: ExtractionConfig = DEFAULT_EXTRACTION_CONFIG,
    today: date | None = None,
) -> ReceiptExtraction:
    """
    Run every field extractor over a normalized document.

    The extractors only read the shared word list and fill disjoint fields,
    so their order does not matter.

    Args:
        document: Normalized OCR document
        config: Extraction thresholds and weights
        today: Date reported when no receipt date is found (defaults to today)
    """
    field_words = list(iter_words(document, config.field_min_confidence))
    item_words = list(iter_words(document, config.line_items.min_confidence))

    merchant = _extract_merchant(document, config.merchant)
    total = _extract_total(field_words, config.total, config.geometry)
    receipt_date = _extract_date(field_words, config.date, today)
    line_items = _extract_line_items(
        item_words,
        config.line_items,
        table_structure=detect_table_structure(item_words, config.table),
    )

    validation = validate_spatial_consistency(line_items.items, total.amount, config.validation)
    confidence = overall_confidence(
        merchant.confidence,
        total.confidence,
        receipt_date.confidence,
        line_items.confidence,
        config.weights,
    )

    warnings: list[str] = []
    if not merchant.merchant:
        warnings.append("merchant not found")
    if total.method == "none":
        warnings.append("no amount found")
    if receipt_date.is_placeholder:
        warnings.append("date not found; using placeholder")
    if line_items.items and not validation.mathematical_consistency:
        warnings.append(f"line items sum {line_items.items_sum:.2f} does not match total {total.amount:.2f}")

    logger.info(
        "Extracted: merchant=%r total=%s (%s) date=%s items=%d overall=%.3f",
        merchant.merchant,
        total.amount,
        total.method,
        receipt_date.date.isoformat(),
        len(line_items.items),
        confidence,
    )

    return ReceiptExtraction(
        merchant=merchant.merchant,
        merchant_confidence=merchant.confidence,
        total=total.amount,
        total_confidence=total.confidence,
        date=receipt_date.date,
        date_confidence=receipt_date.confidence,
        line_items=line_items.items,
        line_items_confidence=line_items.confidence,
        overall_confidence=confidence,
        spatial_validation=validation.mathematical_consistency,
        validation=validation,
        table_structure=line_items.table_structure,
        line_items_sum=line_items.items_sum,
        total_method=total.method,
        date_method=receipt_date.method,
        total_correction=suggest_total_correction(line_items.items, total.amount),
        warnings=tuple(warnings),
    )


def extract_receipt(
    payload: Mapping[str, Any],
    *,
    config: ExtractionConfig = DEFAULT_EXTRACTION_CONFIG,
    today: date | None = None,
) -> ReceiptExtraction:
    """
    Extract a receipt record from a raw Vision ``images:annotate`` response.

    Raises:
        MissingAnnotationError: if the payload has no fullTextAnnotation
    """
    document = normalize_vision_response(payload)
    return extract_from_document(document, config=config, today=today)
