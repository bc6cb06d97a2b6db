"""Core domain models for receipt-tally.

This module provides the data models shared by the tally engine:
- ParsedItem, Noise, NoiseReason: line classification results
- Product, ProductTotal, Report: aggregation state and output
- TallyConfig: classifier/matcher options

Usage:
    from receipt_tally.domain import ParsedItem, Report, TallyConfig
"""

from receipt_tally.domain.tally import (
    Noise,
    NoiseReason,
    ParsedItem,
    Product,
    ProductTotal,
    Report,
    TallyConfig,
)

__all__ = [
    "Noise",
    "NoiseReason",
    "ParsedItem",
    "Product",
    "ProductTotal",
    "Report",
    "TallyConfig",
]
