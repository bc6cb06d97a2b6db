"""Batch-scoped accumulation of parsed receipt items into products."""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType

from receipt_tally.domain.tally import (
    ZERO,
    Noise,
    NoiseReason,
    ParsedItem,
    Product,
    Report,
    TallyConfig,
)
from receipt_tally.runtime import get_logger

from .fuzzy_matcher import FuzzyMatcher
from .normalizer import normalize

logger = get_logger(__name__)


class AggregationInvariantError(RuntimeError):
    """Raised when aggregated state is internally inconsistent."""


class Aggregator:
    """
    Owns the product set of one batch.

    Items are matched against the products known at the moment they are
    ingested, so ingestion order decides canonical names. Create a new
    Aggregator (or call ``reset``) for each batch.
    """

    def __init__(self, config: TallyConfig | None = None, matcher: FuzzyMatcher | None = None) -> None:
        self.config = config or TallyConfig()
        self.matcher = matcher or FuzzyMatcher(self.config.similarity_threshold)
        self.reset()

    def reset(self) -> None:
        self._products: list[Product] = []
        self._by_key: dict[str, Product] = {}
        self._noise: Counter[NoiseReason] = Counter()
        self._receipts: list[str] = []
        self._ingested_total = ZERO
        self._ingested_count = 0

    @property
    def products(self) -> tuple[Product, ...]:
        """Products in creation order."""
        return tuple(self._products)

    def begin_receipt(self, receipt_id: str) -> None:
        self._receipts.append(receipt_id)

    def record_noise(self, noise: Noise) -> None:
        self._noise[noise.reason] += 1

    def ingest(self, item: ParsedItem) -> Product:
        """Add an item to its matching product, creating the product if needed."""
        key = normalize(item.raw_name)
        if not key:
            raise ValueError(f"Item name has no comparable characters: {item.raw_name!r}")
        if item.price <= 0:
            raise ValueError(f"Item price must be positive: {item.raw_name!r} {item.price}")
        if item.price > self.config.price_ceiling:
            raise ValueError(f"Item price exceeds ceiling {self.config.price_ceiling}: {item.raw_name!r} {item.price}")

        product = self._by_key.get(key)
        if product is None:
            product = self.matcher.match(key, ((p, p.normalized_key) for p in self._products))

        if product is not None:
            product.add(item)
            logger.debug(
                "Merged %r (%s) into %r, total now %s",
                item.raw_name,
                item.price,
                product.canonical_name,
                product.total_price,
            )
        else:
            product = Product(
                canonical_name=item.raw_name,
                normalized_key=key,
                total_price=item.price,
                creation_index=len(self._products),
                source_receipts=[item.source_receipt],
            )
            self._products.append(product)
            self._by_key[key] = product
            logger.debug("New product %r (%s) at %s", item.raw_name, key, item.price)

        self._ingested_total += item.price
        self._ingested_count += 1
        return product

    def report(self) -> Report:
        """Snapshot of all products sorted by total descending, then name."""
        self._check_consistency()
        ordered = sorted(self._products, key=lambda p: (-p.total_price, p.canonical_name))
        grand_total = sum((p.total_price for p in ordered), ZERO)
        noise_counts = {reason: self._noise[reason] for reason in NoiseReason if self._noise[reason]}
        return Report(
            products=tuple(p.snapshot() for p in ordered),
            grand_total=grand_total,
            receipt_count=len(self._receipts),
            noise_counts=MappingProxyType(noise_counts),
        )

    def _check_consistency(self) -> None:
        occurrences = 0
        for product in self._products:
            if product.total_price <= 0:
                raise AggregationInvariantError(
                    f"Product {product.canonical_name!r} has non-positive total {product.total_price}"
                )
            if product.occurrence_count < 1:
                raise AggregationInvariantError(
                    f"Product {product.canonical_name!r} has occurrence count {product.occurrence_count}"
                )
            occurrences += product.occurrence_count

        if occurrences != self._ingested_count:
            raise AggregationInvariantError(
                f"Occurrence counts sum to {occurrences}, expected {self._ingested_count} ingested items"
            )
        product_sum = sum((p.total_price for p in self._products), ZERO)
        if product_sum != self._ingested_total:
            raise AggregationInvariantError(
                f"Product totals sum to {product_sum}, expected {self._ingested_total} ingested"
            )
