"""receiptgrid: deterministic spatial extraction of receipt fields from OCR output."""

__version__ = "0.1.0"
