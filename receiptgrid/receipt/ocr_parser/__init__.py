"""Composable spatial receipt parser components."""

from .fields_parser import _extract_date, _extract_merchant, _extract_total
from .items_spatial_parser import _extract_line_items
from .table_structure import detect_table_structure

__all__ = [
    "_extract_date",
    "_extract_line_items",
    "_extract_merchant",
    "_extract_total",
    "detect_table_structure",
]
