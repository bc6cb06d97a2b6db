"""Classify OCR receipt lines as product/price pairs or noise."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from decimal import Decimal, InvalidOperation

from receipt_tally.domain.tally import Noise, NoiseReason, ParsedItem, TallyConfig, to_money

from .normalizer import normalize

CURRENCY_SYMBOLS = "$€£¥"
CURRENCY_CODES = ("EUR", "USD", "GBP", "CAD")
# Single-letter tax flags printed after the price, e.g. "SKITTLES 8.00 H".
TAX_FLAGS = "HTJAB"

# The price is the last token on the line. Grouped thousands are accepted when
# the group and decimal separators differ ("1,234.56" or "1.234,56").
PRICE_TAIL = re.compile(
    r"(?:^|(?<=\s))"
    r"(?P<token>"
    rf"(?:(?P<currency>[{CURRENCY_SYMBOLS}]|(?:{'|'.join(CURRENCY_CODES)})\b)\s*)?"
    r"(?P<sign>-)?"
    r"(?P<amount>\d{1,3}(?:,\d{3})+\.\d+|\d{1,3}(?:\.\d{3})+,\d+|\d+(?:[.,]\d*)?)"
    r"(?P<discount>-)?"
    rf"(?:\s*[{CURRENCY_SYMBOLS}])?"
    r")"
    rf"(?:\s+[{TAX_FLAGS}{TAX_FLAGS.lower()}])?"
    r"\s*$"
)

# "(2) 062843020000 DOUGHNUTS" style quantity prefix.
PAREN_QUANTITY_PREFIX = re.compile(r"^\((\d{1,3})\)\s*")
# "4x Löwenbräu", "4 x BEER", "Ix Cheeseburger" (OCR reads 1 as I/l).
QUANTITY_PREFIX = re.compile(r"^(\d{1,3}|[IilL])\s*[xX×]\s+")
SKU_PREFIX = re.compile(r"^\d{6,}\s*")
# "Löwenbräu Original a 3,00" or "BANANAS @ $0.69/lb" unit price before the line total.
UNIT_PRICE_SUFFIX = re.compile(
    rf"\s+(?:@|a|à)\s*[{CURRENCY_SYMBOLS}]?\s*\d+[.,]\d{{2}}(?:\s*/\s*[A-Za-z0-9]+)?\s*$",
    re.IGNORECASE,
)
NAME_EDGE_CHARS = " \t-:*#.=_|~"


def split_lines(text: str) -> list[str]:
    """Split raw OCR text into lines, accepting any newline convention."""
    if not text:
        return []
    return text.splitlines()


def _parse_amount(amount: str) -> Decimal | None:
    """Parse an amount token with either ',' or '.' as the decimal separator."""
    if "," in amount and "." in amount:
        decimal_sep = "," if amount.rfind(",") > amount.rfind(".") else "."
        group_sep = "." if decimal_sep == "," else ","
        amount = amount.replace(group_sep, "")
    else:
        decimal_sep = "," if "," in amount else "."
    whole, _, fraction = amount.partition(decimal_sep)
    if len(fraction) > 2:
        return None
    try:
        return to_money(f"{whole}.{fraction or '0'}")
    except InvalidOperation:
        return None


def _parse_quantity(token: str) -> int:
    if token.lower() in ("i", "l"):
        return 1
    return int(token)


def _clean_name(text: str) -> tuple[str, int]:
    """Strip receipt codes around a product name, returning (name, quantity)."""
    name = text.strip()
    quantity = 1

    paren = PAREN_QUANTITY_PREFIX.match(name)
    if paren:
        quantity = int(paren.group(1))
        name = name[paren.end() :]

    name = SKU_PREFIX.sub("", name)

    qty = QUANTITY_PREFIX.match(name)
    if qty:
        quantity = _parse_quantity(qty.group(1))
        name = name[qty.end() :]

    name = UNIT_PRICE_SUFFIX.sub("", name)
    return name.strip(NAME_EDGE_CHARS), max(quantity, 1)


def _looks_like_header(line: str) -> bool:
    letters = [c for c in line if c.isalpha()]
    return bool(letters) and all(c.isupper() for c in letters)


class LineClassifier:
    """
    Decide whether an OCR line encodes a product/price pair.

    Lines are never rejected with an exception: anything that cannot yield a
    plausible product and price comes back as ``Noise`` with the reason.
    """

    def __init__(self, config: TallyConfig | None = None) -> None:
        self.config = config or TallyConfig()
        keywords = sorted(self.config.denylist_keywords, key=lambda k: (-len(k), k))
        if keywords:
            alternation = "|".join(re.escape(k) for k in keywords)
            # Whole-word match on letters only, so "TAX1" and "TOTAL:" still hit.
            self._denylist = re.compile(rf"(?<![^\W\d_])(?:{alternation})s?(?![^\W\d_])", re.IGNORECASE)
        else:
            self._denylist = None

    def is_denylisted(self, line: str) -> bool:
        return self._denylist is not None and self._denylist.search(line) is not None

    def classify(self, line: str, source_receipt: str = "", line_number: int | None = None) -> ParsedItem | Noise:
        """Classify one OCR line."""

        def noise(reason: NoiseReason) -> Noise:
            return Noise(line=line, reason=reason, source_receipt=source_receipt, line_number=line_number)

        text = line.strip()
        if not text:
            return noise(NoiseReason.BLANK)
        if self.is_denylisted(text):
            return noise(NoiseReason.DENYLISTED)
        if not any(c.isdigit() for c in text):
            return noise(NoiseReason.NO_DIGITS)

        match = PRICE_TAIL.search(text)
        if match is None:
            last_token = text.split()[-1]
            if last_token.endswith("%"):
                return noise(NoiseReason.NO_PRICE)
            if any(c.isdigit() for c in last_token):
                return noise(NoiseReason.MALFORMED_PRICE)
            if _looks_like_header(text):
                return noise(NoiseReason.HEADER)
            return noise(NoiseReason.NO_PRICE)

        price = _parse_amount(match.group("amount"))
        if price is None:
            return noise(NoiseReason.MALFORMED_PRICE)
        if match.group("sign") or match.group("discount"):
            price = -price

        name, quantity = _clean_name(text[: match.start("token")])
        if not name:
            return noise(NoiseReason.EMPTY_NAME)
        key = normalize(name)
        if not key:
            return noise(NoiseReason.EMPTY_NAME)
        if key.isdigit():
            return noise(NoiseReason.NUMERIC_NAME)

        if price <= 0:
            return noise(NoiseReason.NON_POSITIVE_PRICE)
        if price > self.config.price_ceiling:
            return noise(NoiseReason.PRICE_ABOVE_CEILING)

        return ParsedItem(
            raw_name=name,
            price=price,
            source_receipt=source_receipt,
            quantity=quantity,
            line_number=line_number,
        )

    def classify_lines(
        self, lines: Iterable[str], source_receipt: str = ""
    ) -> Iterator[ParsedItem | Noise]:
        """Classify lines in order; line numbers start at 1."""
        for line_number, line in enumerate(lines, 1):
            yield self.classify(line, source_receipt=source_receipt, line_number=line_number)

    def classify_text(self, text: str | Sequence[str], source_receipt: str = "") -> list[ParsedItem | Noise]:
        """Classify a whole receipt given as raw text or pre-split lines."""
        lines = split_lines(text) if isinstance(text, str) else list(text)
        return list(self.classify_lines(lines, source_receipt=source_receipt))
