"""Tests for OCR service response transformation."""

import pytest

from strukscan.receipt.ocr_helpers import transform_ocr_service_result


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def test_transform_groups_detections_into_rows() -> None:
    raw_result = {
        "status": "success",
        "detections": [
            [_bbox(760, 210, 920, 248), ["45.000", 0.98]],
            [_bbox(20, 20, 500, 60), ["STARBUCKS COFFEE", 0.99]],
            [_bbox(120, 212, 500, 250), ["Cappuccino", 0.97]],
            [_bbox(120, 300, 400, 340), ["TOTAL Rp", 0.96]],
            [_bbox(760, 304, 920, 338), ["45.000", 0.94]],
        ],
    }

    text, confidence = transform_ocr_service_result(raw_result)

    assert text.splitlines() == ["STARBUCKS COFFEE", "Cappuccino 45.000", "TOTAL Rp 45.000"]
    assert round(confidence, 2) == 96.8


def test_transform_keeps_barely_touching_boxes_on_separate_rows() -> None:
    raw_result = {
        "detections": [
            [_bbox(10, 100, 200, 140), ["Kopi Susu", 0.9]],
            [_bbox(10, 135, 200, 175), ["Roti Bakar", 0.9]],
        ]
    }

    text, _ = transform_ocr_service_result(raw_result)

    assert text == "Kopi Susu\nRoti Bakar"


def test_transform_empty_response() -> None:
    assert transform_ocr_service_result({"detections": []}) == ("", 0.0)
    assert transform_ocr_service_result({}) == ("", 0.0)


@pytest.mark.parametrize("body", [["oops"], "oops", None])
def test_transform_rejects_non_object_response(body: object) -> None:
    with pytest.raises(ValueError, match="Expected a JSON object"):
        transform_ocr_service_result(body)
