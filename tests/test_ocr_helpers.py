"""Tests for OCR transformation helpers."""

import io

import pytest
from PIL import Image
from receipt_tally.receipt.ocr_helpers import detections_to_lines, preprocess_image_bytes


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def test_detections_grouped_into_rows_left_to_right() -> None:
    raw_result = {
        "image_width": 1000,
        "image_height": 1200,
        "detections": [
            [_bbox(760, 212, 900, 246), ["3.99", 0.99]],
            [_bbox(120, 210, 500, 250), ["milk whole", 0.98]],
            [_bbox(120, 100, 600, 140), ["FRESHMART", 0.95]],
            [_bbox(120, 300, 500, 340), ["bread wheat", 0.97]],
            [_bbox(760, 304, 900, 338), ["2.49", 0.99]],
        ],
    }

    assert detections_to_lines(raw_result, padding=0) == ["FRESHMART", "milk whole 3.99", "bread wheat 2.49"]


def test_low_confidence_and_blank_detections_are_dropped() -> None:
    raw_result = {
        "detections": [
            [_bbox(120, 210, 500, 250), ["eggs large", 0.98]],
            [_bbox(520, 210, 600, 250), ["##", 0.30]],
            [_bbox(760, 212, 900, 246), ["  ", 0.99]],
            [_bbox(760, 212, 900, 246), ["4.99", 0.99]],
        ],
    }

    assert detections_to_lines(raw_result, padding=0) == ["eggs large 4.99"]


def test_no_detections() -> None:
    assert detections_to_lines({"detections": []}) == []


def test_preprocess_grayscale_resize_and_pad() -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (4000, 1000), "red").save(buffer, format="PNG")

    processed = Image.open(io.BytesIO(preprocess_image_bytes(buffer.getvalue(), padding=10)))

    assert processed.format == "JPEG"
    assert processed.mode == "L"
    assert processed.size == (3000 + 20, 750 + 20)


def test_detections_must_come_in_an_object() -> None:
    with pytest.raises(ValueError, match="JSON object"):
        detections_to_lines([1, 2])
