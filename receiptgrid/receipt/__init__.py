"""Spatial receipt extraction: pure functions from OCR payloads to ReceiptExtraction records."""
