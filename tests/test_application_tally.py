"""Tests for the directory tally workflow."""

from decimal import Decimal
from pathlib import Path

from receipt_tally.application.tally import TallyRequest, run_tally
from receipt_tally.runtime.ocr_client import OCRServiceUnavailable


def test_text_receipts_are_tallied_in_path_order(receipts_dir: Path) -> None:
    result = run_tally(TallyRequest(receipts_dir=receipts_dir))

    assert result.status == "ok"
    assert result.report is not None
    assert [(p.canonical_name, p.total_price) for p in result.report.products] == [
        ("milk whole", Decimal("8.97")),
        ("eggs large", Decimal("4.99")),
        ("bread wheat", Decimal("2.49")),
    ]
    assert result.report.products[0].source_receipts == ("01_store.txt", "02_store.txt")
    assert result.failed_receipts == ()


def test_images_go_through_ocr(tmp_path: Path) -> None:
    (tmp_path / "a.jpg").write_bytes(b"fake")
    (tmp_path / "b.txt").write_text("coffee 3.50\n", encoding="utf-8")
    calls: list[tuple[str, str]] = []

    def fake_ocr(path: Path, ocr_url: str) -> list[str]:
        calls.append((path.name, ocr_url))
        return ["coffe 2.00", "TOTAL 2.00"]

    result = run_tally(TallyRequest(receipts_dir=tmp_path, ocr_url="http://ocr.test", ocr=fake_ocr))

    assert calls == [("a.jpg", "http://ocr.test")]
    assert result.report is not None
    (product,) = result.report.products
    assert product.canonical_name == "coffe"
    assert product.total_price == Decimal("5.50")


def test_failed_ocr_skips_receipt_and_continues(tmp_path: Path) -> None:
    (tmp_path / "a.jpg").write_bytes(b"fake")
    (tmp_path / "b.txt").write_text("coffee 3.50\n", encoding="utf-8")

    def failing_ocr(path: Path, ocr_url: str) -> list[str]:
        raise OCRServiceUnavailable("Failed to connect to OCR service")

    result = run_tally(TallyRequest(receipts_dir=tmp_path, ocr=failing_ocr))

    assert result.status == "ok"
    assert result.failed_receipts == (("a.jpg", "Failed to connect to OCR service"),)
    assert result.report is not None
    assert result.report.grand_total == Decimal("3.50")
    assert result.report.receipt_count == 1


def test_missing_directory(tmp_path: Path) -> None:
    result = run_tally(TallyRequest(receipts_dir=tmp_path / "missing"))

    assert result.status == "dir_not_found"
    assert result.report is None


def test_directory_without_receipts(tmp_path: Path) -> None:
    (tmp_path / "readme.md").write_text("nothing here", encoding="utf-8")

    result = run_tally(TallyRequest(receipts_dir=tmp_path))

    assert result.status == "no_receipts"
    assert result.report is not None
    assert result.report.is_empty()
