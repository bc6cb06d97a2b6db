"""Tally command handlers used by the CLI."""

import argparse
import dataclasses
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from receipt_tally.domain.tally import TallyConfig
from receipt_tally.receipt.formatter import format_classification, format_report
from receipt_tally.receipt.line_classifier import LineClassifier
from receipt_tally.runtime import get_logger, get_paths, load_tally_config, set_log_level

logger = get_logger(__name__)


def _resolve_config(args: argparse.Namespace) -> TallyConfig:
    """Config file values overridden by command-line flags."""
    config = load_tally_config(args.config)
    overrides: dict[str, object] = {}
    if args.threshold is not None:
        overrides["similarity_threshold"] = args.threshold
    if args.ceiling is not None:
        try:
            overrides["price_ceiling"] = Decimal(args.ceiling)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid price ceiling: {args.ceiling}") from exc
    return dataclasses.replace(config, **overrides) if overrides else config


def _setup(args: argparse.Namespace) -> TallyConfig | None:
    if args.verbose:
        set_log_level(logging.DEBUG)
    try:
        return _resolve_config(args)
    except ValueError as exc:
        logger.error("%s", exc)
        print(f"Invalid configuration: {exc}")
        return None


def cmd_tally(args: argparse.Namespace) -> int:
    """Tally every receipt in a directory and print the report."""
    from receipt_tally.application.tally import TallyRequest, run_tally

    config = _setup(args)
    if config is None:
        return 1

    receipts_dir = Path(args.dir) if args.dir else get_paths().receipts
    print(f"Analyzing receipts in: {receipts_dir}")

    result = run_tally(TallyRequest(receipts_dir=receipts_dir, config=config, ocr_url=args.ocr_url))

    if result.status == "dir_not_found":
        print(f"Error: {result.error}")
        return 1

    if result.status == "no_receipts":
        print(result.error)
        return 0

    assert result.report is not None
    print()
    print(format_report(result.report, currency=args.currency, show_noise=args.show_noise))

    if result.failed_receipts:
        print(f"\n{len(result.failed_receipts)} receipt(s) could not be processed:")
        for receipt_id, error in result.failed_receipts:
            print(f"  {receipt_id}: {error}")
        return 1
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Print the classification of every line in an OCR text file."""
    config = _setup(args)
    if config is None:
        return 1

    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file not found: {path}")
        return 1

    text = path.read_text(encoding="utf-8", errors="replace")
    results = LineClassifier(config).classify_text(text, source_receipt=path.name)
    print(format_classification(results, currency=args.currency))
    return 0
