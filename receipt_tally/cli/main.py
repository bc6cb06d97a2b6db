#!/usr/bin/env python3

import argparse
from collections.abc import Sequence

from receipt_tally.runtime.ocr_client import DEFAULT_OCR_URL


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="receipt-tally",
        description="Aggregate product prices from receipt OCR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  tally [dir]                Tally every receipt image/text file in a directory
  classify <file>            Show how each line of an OCR text file is classified

Notes:
  Images are sent to the OCR service; .txt files are read as pre-extracted OCR text.
  Options are read from config/receipt_tally.toml under RECEIPT_TALLY_HOME (or the
  current directory); command-line flags override them.
""",
    )
    parser.add_argument("--config", default=None, help="Path to receipt_tally.toml (default: config/receipt_tally.toml)")
    parser.add_argument("--threshold", type=float, default=None, help="Fuzzy match threshold in [0, 1] (default: 0.80)")
    parser.add_argument("--ceiling", default=None, help="Reject prices above this amount (default: 1000.00)")
    parser.add_argument("--currency", default="$", help="Currency symbol used when printing (default: $)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    tally_parser = subparsers.add_parser("tally", help="Tally receipts in a directory")
    tally_parser.add_argument("dir", nargs="?", default=None, help="Receipt directory (default: receipts/)")
    tally_parser.add_argument(
        "--ocr-url", default=DEFAULT_OCR_URL, help=f"OCR service URL (default: {DEFAULT_OCR_URL})"
    )
    tally_parser.add_argument("--show-noise", action="store_true", help="Print skipped-line counts by reason")

    classify_parser = subparsers.add_parser("classify", help="Classify the lines of an OCR text file")
    classify_parser.add_argument("file", help="Text file with one OCR line per line")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    from receipt_tally.cli.tally import cmd_classify, cmd_tally

    if args.command == "tally":
        return cmd_tally(args)
    if args.command == "classify":
        return cmd_classify(args)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
