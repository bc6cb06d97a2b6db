"""Aggregate product prices from OCR'd retail receipts."""

__version__ = "0.1.0"
