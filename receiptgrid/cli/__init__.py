"""Command-line interface for receiptgrid.

Usage:
    receiptgrid [--log-level LEVEL] extract <vision.json> [--config PATH] [--today YYYY-MM-DD] [--compact]
    receiptgrid serve [--host] [--port]
"""
