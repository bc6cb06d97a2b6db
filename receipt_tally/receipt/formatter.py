"""Plain-text rendering of tally reports and line classifications."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from receipt_tally.domain.tally import Noise, ParsedItem, Report


def _format_money(amount: Decimal, currency: str) -> str:
    return f"{currency}{amount:,.2f}"


def _format_rows_aligned(rows: list[tuple[str, str, str]], indent: str = "") -> list[str]:
    """
    Format table rows with a left-aligned first column and right-aligned others.

    Args:
        rows: List of (name, count, amount) tuples, header row included
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines, with a rule under the header row
    """
    if not rows:
        return []

    name_width = max(len(name) for name, _, _ in rows)
    count_width = max(len(count) for _, count, _ in rows)
    amount_width = max(len(amount) for _, _, amount in rows)

    lines = []
    for name, count, amount in rows:
        lines.append(f"{indent}{name.ljust(name_width)}  {count.rjust(count_width)}  {amount.rjust(amount_width)}")
    rule = f"{indent}{'-' * (name_width + count_width + amount_width + 4)}"
    lines.insert(1, rule)
    return lines


def format_report(report: Report, currency: str = "$", show_noise: bool = False) -> str:
    """Render a report as an aligned table followed by the grand total."""
    if report.is_empty():
        return "No products found."

    rows = [("Product", "Count", "Total")]
    for product in report.products:
        rows.append(
            (
                product.canonical_name,
                str(product.occurrence_count),
                _format_money(product.total_price, currency),
            )
        )
    rows.append(("TOTAL", "", _format_money(report.grand_total, currency)))

    lines = _format_rows_aligned(rows)
    # Rule above the TOTAL row as well.
    lines.insert(len(lines) - 1, lines[1])
    lines.append("")
    lines.append(f"Found {report.unique_product_count} unique products in {report.receipt_count} receipt(s)")

    if show_noise and report.noise_counts:
        lines.append("Skipped lines:")
        for reason, count in report.noise_counts.items():
            lines.append(f"  {reason.value}: {count}")
    return "\n".join(lines)


def format_classification(results: Iterable[ParsedItem | Noise], currency: str = "$") -> str:
    """Render per-line classification results for debugging OCR text."""
    lines = []
    for result in results:
        number = f"{result.line_number:>3}" if result.line_number is not None else "  ?"
        if isinstance(result, Noise):
            lines.append(f"{number}  NOISE  [{result.reason.value}] {result.line.strip()}")
        else:
            qty = f" x{result.quantity}" if result.quantity > 1 else ""
            lines.append(f"{number}  ITEM   {result.raw_name}{qty} - {_format_money(result.price, currency)}")
    return "\n".join(lines)
