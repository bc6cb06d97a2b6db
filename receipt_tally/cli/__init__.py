"""Command-line interface for receipt-tally.

Usage:
    receipt-tally tally [dir]
    receipt-tally tally [dir] --ocr-url http://localhost:8001
    receipt-tally --threshold 0.85 tally [dir]
    receipt-tally classify <file>
"""
