"""Receipt directory tally workflow orchestration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from receipt_tally.domain.tally import Report, TallyConfig
from receipt_tally.receipt.pipeline import ReceiptPipeline
from receipt_tally.runtime import get_logger
from receipt_tally.runtime.ocr_client import DEFAULT_OCR_URL, OCRServiceUnavailable, call_ocr_service
from receipt_tally.runtime.receipt_source import is_text_receipt, iter_receipt_files, receipt_id_for

logger = get_logger(__name__)

TallyStatus = Literal[
    "ok",
    "dir_not_found",
    "no_receipts",
]

# (image path, OCR URL) -> text lines
OcrFunc = Callable[[Path, str], list[str]]


@dataclass(frozen=True)
class TallyRequest:
    """Inputs for running the tally workflow."""

    receipts_dir: Path
    config: TallyConfig = field(default_factory=TallyConfig)
    ocr_url: str = DEFAULT_OCR_URL
    ocr: OcrFunc | None = None


@dataclass(frozen=True)
class TallyResult:
    """Outcome from the tally workflow."""

    status: TallyStatus
    report: Report | None = None
    failed_receipts: tuple[tuple[str, str], ...] = ()
    error: str | None = None


def read_receipt_lines(path: Path, ocr_url: str, ocr: OcrFunc | None = None) -> list[str]:
    """Return the OCR lines of one receipt file (text files are read directly)."""
    if is_text_receipt(path):
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    ocr_func = ocr or call_ocr_service
    return ocr_func(path, ocr_url)


def run_tally(request: TallyRequest) -> TallyResult:
    """Run tally flow: walk directory -> OCR each receipt -> aggregate -> report."""
    try:
        paths = list(iter_receipt_files(request.receipts_dir))
    except FileNotFoundError as exc:
        return TallyResult(status="dir_not_found", error=str(exc))

    if not paths:
        return TallyResult(
            status="no_receipts",
            report=Report(),
            error=f"No receipt images or text files found in {request.receipts_dir}",
        )

    pipeline = ReceiptPipeline(request.config)
    failed: list[tuple[str, str]] = []

    # Sequential on purpose: every receipt is matched against the products
    # created by the receipts before it.
    for path in paths:
        receipt_id = receipt_id_for(path, request.receipts_dir)
        logger.info("Processing: %s", receipt_id)
        try:
            lines = read_receipt_lines(path, request.ocr_url, request.ocr)
        except (OCRServiceUnavailable, OSError) as exc:
            logger.error("Error processing %s: %s", receipt_id, exc)
            failed.append((receipt_id, str(exc)))
            continue
        pipeline.ingest_receipt(receipt_id, lines)

    report = pipeline.aggregator.report()
    logger.info(
        "Tallied %d receipt(s), %d failed: %d unique product(s), grand total %s",
        report.receipt_count,
        len(failed),
        report.unique_product_count,
        report.grand_total,
    )
    return TallyResult(status="ok", report=report, failed_receipts=tuple(failed))
