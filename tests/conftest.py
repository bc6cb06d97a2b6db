"""Shared pytest fixtures for receipt-tally tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from receipt_tally.domain.tally import TallyConfig
from receipt_tally.runtime import load_tally_config, reset_paths

RECEIPT_ONE = "milk whole 3.99\nbread wheat 2.49\nTOTAL 6.48\n"
RECEIPT_TWO = "milk whle 4.98\neggs large 4.99\n"


@pytest.fixture
def config() -> TallyConfig:
    return TallyConfig()


@pytest.fixture
def two_receipts() -> list[tuple[str, str]]:
    """The grocery batch used by the end-to-end scenarios."""
    return [("receipt-1", RECEIPT_ONE), ("receipt-2", RECEIPT_TWO)]


@pytest.fixture
def receipts_dir(tmp_path: Path) -> Path:
    """A receipt directory holding the two grocery receipts as OCR text files."""
    directory = tmp_path / "receipts"
    directory.mkdir()
    (directory / "01_store.txt").write_text(RECEIPT_ONE, encoding="utf-8")
    (directory / "02_store.txt").write_text(RECEIPT_TWO, encoding="utf-8")
    return directory


@pytest.fixture(autouse=True)
def _isolated_runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the project root at a scratch directory and drop cached config."""
    monkeypatch.setenv("RECEIPT_TALLY_HOME", str(tmp_path / "home"))
    reset_paths()
    load_tally_config.cache_clear()
    yield
    reset_paths()
    load_tally_config.cache_clear()
