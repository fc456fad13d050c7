"""Pure OCR transformation helpers for the HTTP OCR service response."""

from typing import Any

MIN_ROW_OVERLAP_RATIO = 0.5  # Vertical overlap needed to put two detections on one row


def _boxes_overlap_y(det1: dict[str, float], det2: dict[str, float], min_overlap_ratio: float) -> bool:
    """
    Check if two detection boxes overlap in Y-axis by at least min_overlap_ratio.

    The ratio is measured against the smaller of the two box heights, so a
    short price next to a tall item name still lands on the same row.
    """
    overlap_start = max(det1["y_min"], det2["y_min"])
    overlap_end = min(det1["y_max"], det2["y_max"])
    if overlap_start >= overlap_end:
        return False

    smaller_height = min(det1["y_max"] - det1["y_min"], det2["y_max"] - det2["y_min"])
    # Avoid division by zero for degenerate boxes
    if smaller_height <= 0:
        return False
    return (overlap_end - overlap_start) / smaller_height >= min_overlap_ratio


def transform_ocr_service_result(
    raw_result: Any, min_overlap_ratio: float = MIN_ROW_OVERLAP_RATIO
) -> tuple[str, float]:
    """
    Turn a PaddleOCR-style service response into text and confidence.

    The service returns ``{"detections": [[bbox, [text, confidence]], ...]}``
    with ``bbox`` as four ``[x, y]`` points and confidence in [0, 1].
    Detections are grouped into rows top to bottom and joined left to right.

    Returns:
        Tuple of (full_text, confidence on a 0-100 scale).
    """
    if not isinstance(raw_result, dict):
        raise ValueError(f"Expected a JSON object, got {type(raw_result).__name__}")
    detections = raw_result.get("detections") or []

    boxes: list[dict[str, Any]] = []
    for detection in detections:
        bbox, (text, confidence) = detection
        xs = [point[0] for point in bbox]
        ys = [point[1] for point in bbox]
        boxes.append(
            {
                "text": str(text),
                "confidence": float(confidence),
                "min_x": min(xs),
                "y_min": min(ys),
                "y_max": max(ys),
                "center_y": sum(ys) / len(ys),
            }
        )

    if not boxes:
        return "", 0.0

    boxes.sort(key=lambda b: (b["center_y"], b["min_x"]))

    rows: list[list[dict[str, Any]]] = []
    for box in boxes:
        if rows and any(_boxes_overlap_y(box, other, min_overlap_ratio) for other in rows[-1]):
            rows[-1].append(box)
        else:
            rows.append([box])

    lines = []
    for row in rows:
        row.sort(key=lambda b: b["min_x"])
        lines.append(" ".join(b["text"] for b in row))

    mean_confidence = sum(b["confidence"] for b in boxes) / len(boxes)
    return "\n".join(lines), mean_confidence * 100
