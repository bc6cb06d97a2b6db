"""Data models for receipt line classification and product aggregation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

DEFAULT_SIMILARITY_THRESHOLD = 0.80
DEFAULT_PRICE_CEILING = Decimal("1000.00")
DEFAULT_DENYLIST_KEYWORDS = frozenset({"total", "subtotal", "tax", "vat", "change", "cash", "card", "balance"})


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize an amount to two fractional digits."""
    return Decimal(value).quantize(CENTS)


@dataclass(frozen=True)
class TallyConfig:
    """Options consumed by the classifier, matcher and aggregator."""

    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    price_ceiling: Decimal = DEFAULT_PRICE_CEILING
    denylist_keywords: frozenset[str] = DEFAULT_DENYLIST_KEYWORDS

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be within [0, 1], got {self.similarity_threshold}")
        if not Decimal(self.price_ceiling).is_finite():
            raise ValueError(f"price_ceiling must be a finite amount, got {self.price_ceiling}")
        if self.price_ceiling <= 0:
            raise ValueError(f"price_ceiling must be positive, got {self.price_ceiling}")
        object.__setattr__(self, "price_ceiling", to_money(self.price_ceiling))
        object.__setattr__(self, "denylist_keywords", frozenset(k.strip().lower() for k in self.denylist_keywords))


class NoiseReason(Enum):
    """Why a line did not yield a product/price pair."""

    BLANK = "blank"
    NO_DIGITS = "no_digits"
    DENYLISTED = "denylisted"
    HEADER = "header"
    NO_PRICE = "no_price"
    MALFORMED_PRICE = "malformed_price"
    EMPTY_NAME = "empty_name"
    NUMERIC_NAME = "numeric_name"
    NON_POSITIVE_PRICE = "non_positive_price"
    PRICE_ABOVE_CEILING = "price_above_ceiling"

    @property
    def is_outlier(self) -> bool:
        """True for well-formed lines dropped because of their price."""
        return self in (NoiseReason.NON_POSITIVE_PRICE, NoiseReason.PRICE_ABOVE_CEILING)


@dataclass(frozen=True)
class ParsedItem:
    """A product/price pair read from one receipt line."""

    raw_name: str
    price: Decimal
    source_receipt: str
    # Informational only; the price is the authoritative line total.
    quantity: int = 1
    line_number: int | None = None


@dataclass(frozen=True)
class Noise:
    """A line that does not represent a product/price pair."""

    line: str
    reason: NoiseReason
    source_receipt: str = ""
    line_number: int | None = None


@dataclass
class Product:
    """Running total for one product, owned by the Aggregator."""

    canonical_name: str
    normalized_key: str
    total_price: Decimal
    occurrence_count: int = 1
    creation_index: int = 0
    source_receipts: list[str] = field(default_factory=list)

    def add(self, item: ParsedItem) -> None:
        self.total_price += item.price
        self.occurrence_count += 1
        if item.source_receipt not in self.source_receipts:
            self.source_receipts.append(item.source_receipt)

    def snapshot(self) -> ProductTotal:
        return ProductTotal(
            canonical_name=self.canonical_name,
            normalized_key=self.normalized_key,
            total_price=self.total_price,
            occurrence_count=self.occurrence_count,
            source_receipts=tuple(self.source_receipts),
        )


@dataclass(frozen=True)
class ProductTotal:
    """Read-only product line of a Report."""

    canonical_name: str
    normalized_key: str
    total_price: Decimal
    occurrence_count: int
    source_receipts: tuple[str, ...] = ()


def _empty_noise_counts() -> Mapping[NoiseReason, int]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Report:
    """Aggregated products of a batch, sorted by total price descending."""

    products: tuple[ProductTotal, ...] = ()
    grand_total: Decimal = ZERO
    receipt_count: int = 0
    noise_counts: Mapping[NoiseReason, int] = field(default_factory=_empty_noise_counts)

    @property
    def unique_product_count(self) -> int:
        return len(self.products)

    @property
    def noise_total(self) -> int:
        return sum(self.noise_counts.values())

    @property
    def rejected_outliers(self) -> int:
        return sum(count for reason, count in self.noise_counts.items() if reason.is_outlier)

    def is_empty(self) -> bool:
        return not self.products
