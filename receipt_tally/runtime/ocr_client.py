"""OCR service client: receipt image in, text lines out."""

import time
from pathlib import Path

import httpx

from receipt_tally.receipt.ocr_helpers import OCR_IMAGE_PADDING, detections_to_lines, preprocess_image_bytes
from receipt_tally.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
OCR_TIMEOUT_SECONDS = 60.0


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def call_ocr_service(receipt_path: Path, ocr_url: str = DEFAULT_OCR_URL, client: httpx.Client | None = None) -> list[str]:
    """
    Send a receipt image to the OCR service and return its text lines.

    Args:
        receipt_path: Image file to OCR
        ocr_url: Base URL of the OCR service (POST {ocr_url}/ocr)
        client: Optional httpx client to reuse across a batch

    Raises:
        OCRServiceUnavailable: On connection errors, non-200 responses or
            responses that are not valid OCR JSON.
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending %s to OCR service at %s...", receipt_path.name, ocr_url)

    image_bytes = preprocess_image_bytes(receipt_path.read_bytes())
    files = {"file": (receipt_path.name, image_bytes, "image/jpeg")}

    try:
        start_time = time.time()
        if client is None:
            response = httpx.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        else:
            response = client.post(f"{ocr_url}/ocr", files=files, timeout=OCR_TIMEOUT_SECONDS)
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        raw_result = response.json()
        return detections_to_lines(raw_result, padding=OCR_IMAGE_PADDING)
    except (ValueError, TypeError, KeyError) as e:
        logger.error("Malformed OCR response for %s: %s", receipt_path.name, e)
        raise OCRServiceUnavailable(f"Malformed OCR response: {e}") from e
