"""Fuzzy matching of normalized product keys against known products."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from fractions import Fraction

from rapidfuzz.distance import Levenshtein

from receipt_tally.domain.tally import DEFAULT_SIMILARITY_THRESHOLD, Product


@dataclass(frozen=True)
class MatchResult:
    """Best candidate for a key, with its exact similarity ratio."""

    product: Product
    ratio: Fraction
    distance: int

    @property
    def score(self) -> float:
        return float(self.ratio)


def _ratio(a: str, b: str) -> tuple[Fraction, int]:
    """Exact edit-distance ratio 1 - distance / max(len) and the distance itself."""
    longest = max(len(a), len(b))
    if longest == 0:
        return Fraction(0), 0
    distance = Levenshtein.distance(a, b)
    return Fraction(longest - distance, longest), distance


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1] between two normalized keys.

    Uses the Levenshtein ratio ``1 - distance / max(len(a), len(b))``, so a single
    substitution, insertion or deletion in a nine-character key still scores
    about 0.89. Two empty keys score 0: empty keys never match anything.
    """
    ratio, _ = _ratio(a, b)
    return float(ratio)


class FuzzyMatcher:
    """Resolve a normalized key to an existing product or signal no match."""

    def __init__(self, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold
        # Compare against the decimal as written (0.8 == 4/5), not its binary float.
        self._threshold = Fraction(str(threshold))

    def best_match(self, key: str, existing: Iterable[tuple[Product, str]]) -> MatchResult | None:
        """
        Return the highest-scoring candidate regardless of the threshold.

        Candidates must be supplied in creation order: only a strictly greater
        score replaces the current best, so the earliest product wins ties.
        """
        if not key:
            return None

        best: MatchResult | None = None
        for product, candidate_key in existing:
            ratio, distance = _ratio(key, candidate_key)
            if best is None or ratio > best.ratio:
                best = MatchResult(product=product, ratio=ratio, distance=distance)
                if ratio == 1:
                    break
        return best

    def accepts(self, result: MatchResult | None) -> bool:
        """True if the result clears the threshold. Zero similarity never matches."""
        if result is None or result.ratio == 0:
            return False
        return result.ratio >= self._threshold

    def match(self, key: str, existing: Iterable[tuple[Product, str]]) -> Product | None:
        """Return the best product scoring at or above the threshold, else None."""
        result = self.best_match(key, existing)
        return result.product if self.accepts(result) else None
