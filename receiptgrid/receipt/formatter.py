"""Format ReceiptExtraction records as JSON for review tooling."""

import json
from decimal import Decimal
from typing import Any

from receiptgrid.domain.receipt import LineItem, ReceiptExtraction, TableColumn


def _amount(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


def _format_line_item(item: LineItem) -> dict[str, Any]:
    formatted: dict[str, Any] = {
        "description": item.description,
        "totalPrice": _amount(item.total_price),
        "confidence": item.confidence,
        "position": {"x": item.position[0], "y": item.position[1]},
        "rawText": item.raw_text,
    }
    # Optional fields are omitted rather than written as null
    if item.quantity is not None:
        formatted["quantity"] = item.quantity
    if item.unit_price is not None:
        formatted["unitPrice"] = _amount(item.unit_price)
    return formatted


def _format_column(column: TableColumn) -> dict[str, Any]:
    return {
        "type": column.type,
        "xRange": {"min": column.x_range[0], "max": column.x_range[1]},
        "confidence": column.confidence,
    }


def format_extraction(extraction: ReceiptExtraction) -> dict[str, Any]:
    """Render an extraction as a JSON-ready mapping."""
    correction = extraction.total_correction
    return {
        "merchant": extraction.merchant,
        "merchant_confidence": extraction.merchant_confidence,
        "total": _amount(extraction.total),
        "total_confidence": extraction.total_confidence,
        "total_method": extraction.total_method,
        "date": extraction.date.isoformat(),
        "date_confidence": extraction.date_confidence,
        "date_method": extraction.date_method,
        "lineItems": [_format_line_item(item) for item in extraction.line_items],
        "lineItems_confidence": extraction.line_items_confidence,
        "lineItems_sum": _amount(extraction.line_items_sum),
        "overall_confidence": extraction.overall_confidence,
        "spatial_validation": extraction.spatial_validation,
        "validation": {
            "mathematical_consistency": extraction.validation.mathematical_consistency,
            "prices_aligned": extraction.validation.prices_aligned,
            "vertically_ordered": extraction.validation.vertically_ordered,
            "table_layout_valid": extraction.validation.table_layout_valid,
        },
        "tableStructure": [_format_column(column) for column in extraction.table_structure],
        "total_correction": (
            None
            if correction is None
            else {"corrected_total": _amount(correction.corrected_total), "reason": correction.reason}
        ),
        "warnings": list(extraction.warnings),
    }


def format_extraction_json(extraction: ReceiptExtraction, *, indent: int | None = 2) -> str:
    """Serialize an extraction to JSON text."""
    return json.dumps(format_extraction(extraction), indent=indent)
