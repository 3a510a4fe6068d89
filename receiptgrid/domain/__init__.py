"""Core domain models for receiptgrid.

This module provides the data models used throughout the project:
- VisionDocument, Page, Block, Paragraph, Word: normalized OCR tree
- ReceiptExtraction, LineItem, TableColumn: extraction output

Usage:
    from receiptgrid.domain import ReceiptExtraction, Word
"""

from receiptgrid.domain.document import (
    Block,
    BoundingPolygon,
    Page,
    Paragraph,
    Vertex,
    VisionDocument,
    Word,
)
from receiptgrid.domain.receipt import (
    DateField,
    LineItem,
    LineItemsResult,
    MerchantField,
    ReceiptExtraction,
    SpatialValidation,
    TableColumn,
    TotalCorrection,
    TotalField,
)

__all__ = [
    "Block",
    "BoundingPolygon",
    "Page",
    "Paragraph",
    "Vertex",
    "VisionDocument",
    "Word",
    "DateField",
    "LineItem",
    "LineItemsResult",
    "MerchantField",
    "ReceiptExtraction",
    "SpatialValidation",
    "TableColumn",
    "TotalCorrection",
    "TotalField",
]
