"""Filesystem walker supplying receipts in a stable order."""

from collections.abc import Iterator
from pathlib import Path

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".tif", ".tiff", ".bmp", ".webp"}
# Pre-extracted OCR text, one receipt per file.
TEXT_EXTS = {".txt"}


def is_receipt_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTS | TEXT_EXTS


def is_text_receipt(path: Path) -> bool:
    return path.suffix.lower() in TEXT_EXTS


def receipt_id_for(path: Path, root: Path) -> str:
    """Identifier of a receipt: its path relative to the scanned directory."""
    return path.relative_to(root).as_posix()


def iter_receipt_files(directory: Path) -> Iterator[Path]:
    """
    Yield receipt images and text files under directory, recursively.

    Files are ordered by relative path so repeated runs feed the aggregator in
    the same order. Hidden files and directories are skipped.

    Raises:
        FileNotFoundError: If directory does not exist or is not a directory.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Receipt directory not found: {directory}")

    candidates = []
    for path in directory.rglob("*"):
        relative = path.relative_to(directory)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if is_receipt_file(path):
            candidates.append(path)

    yield from sorted(candidates, key=lambda p: relative_sort_key(p, directory))


def relative_sort_key(path: Path, root: Path) -> tuple[str, ...]:
    return path.relative_to(root).parts
