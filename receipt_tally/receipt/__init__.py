"""Receipt line parsing, fuzzy product matching and aggregation."""

from .aggregator import AggregationInvariantError, Aggregator
from .fuzzy_matcher import FuzzyMatcher, MatchResult, similarity
from .line_classifier import LineClassifier, split_lines
from .normalizer import normalize
from .pipeline import ReceiptPipeline, tally_receipts

__all__ = [
    "AggregationInvariantError",
    "Aggregator",
    "FuzzyMatcher",
    "LineClassifier",
    "MatchResult",
    "ReceiptPipeline",
    "normalize",
    "similarity",
    "split_lines",
    "tally_receipts",
]
