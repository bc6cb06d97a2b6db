"""Pure OCR transformation helpers: image preprocessing and detection grouping."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation
CONTRAST_FACTOR = 1.5
MIN_CONFIDENCE = 0.7
MIN_TEXT_LENGTH = 1


def preprocess_image_bytes(
    image_bytes: bytes,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    padding: int = OCR_IMAGE_PADDING,
    contrast: float = CONTRAST_FACTOR,
) -> bytes:
    """
    Prepare a receipt photo for OCR.

    Applies EXIF orientation, converts to grayscale, boosts contrast, resizes
    if the image exceeds max_dimension on either side and adds white padding.

    Args:
        image_bytes: Image data as bytes
        max_dimension: Maximum allowed dimension (width or height)
        padding: White padding to add around image (pixels)
        contrast: Contrast enhancement factor (1.0 leaves the image unchanged)

    Returns:
        Image bytes (JPEG format)
    """
    from PIL import Image, ImageEnhance, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)
    img = img.convert("L")

    if contrast != 1.0:
        img = ImageEnhance.Contrast(img).enhance(contrast)

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        if width > height:
            new_width = max_dimension
            new_height = int(height * (max_dimension / width))
        else:
            new_height = max_dimension
            new_width = int(width * (max_dimension / height))
        img = img.resize((new_width, new_height), Image.Resampling.LANCZOS)

    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _boxes_overlap_y(det1: dict, det2: dict, min_overlap_ratio: float = 0.5) -> bool:
    """
    Check if two detection boxes overlap in Y-axis by at least min_overlap_ratio.

    The ratio is relative to the smaller box, so a short price box next to a
    tall two-line item box still counts as the same row.
    """
    overlap_start = max(det1["y_min"], det2["y_min"])
    overlap_end = min(det1["y_max"], det2["y_max"])
    if overlap_start >= overlap_end:
        return False

    smaller_height = min(det1["y_max"] - det1["y_min"], det2["y_max"] - det2["y_min"])
    if smaller_height <= 0:
        return False
    return (overlap_end - overlap_start) / smaller_height >= min_overlap_ratio


def _group_detections_into_rows(detections: list[dict]) -> list[list[dict]]:
    """Group detections into rows, top to bottom, each row ordered left to right."""
    rows: list[list[dict]] = []
    for det in sorted(detections, key=lambda d: (d["center_y"], d["min_x"])):
        for row in rows:
            if any(_boxes_overlap_y(det, other) for other in row):
                row.append(det)
                break
        else:
            rows.append([det])

    for row in rows:
        row.sort(key=lambda d: d["min_x"])
    rows.sort(key=lambda row: sum(d["center_y"] for d in row) / len(row))
    return rows


def detections_to_lines(raw_result: dict[str, Any], padding: int = OCR_IMAGE_PADDING) -> list[str]:
    """
    Turn a raw OCR service result into receipt text lines.

    The result carries ``detections`` as ``[bbox, [text, confidence]]`` pairs,
    where bbox is four ``[x, y]`` points in padded-image pixels. Low confidence
    and empty detections are dropped.
    """
    if not isinstance(raw_result, dict):
        raise ValueError(f"OCR result must be a JSON object, got {type(raw_result).__name__}")
    detection_data = []
    for detection in raw_result.get("detections", []):
        bbox, (text, confidence) = detection
        if confidence < MIN_CONFIDENCE:
            continue
        if len(text.strip()) < MIN_TEXT_LENGTH:
            continue

        y_coords = [point[1] - padding for point in bbox]
        detection_data.append(
            {
                "text": text.strip(),
                "confidence": float(confidence),
                "center_y": sum(y_coords) / len(y_coords),
                "y_min": min(y_coords),
                "y_max": max(y_coords),
                "min_x": min(point[0] - padding for point in bbox),
            }
        )

    return [" ".join(det["text"] for det in row) for row in _group_detections_into_rows(detection_data)]
