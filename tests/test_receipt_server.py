"""Tests for the FastAPI scanning endpoint."""

from __future__ import annotations

from conftest import FakeRecognizer
from fastapi.testclient import TestClient

from strukscan.runtime.receipt_server import create_app


def test_health_reports_recognizer_state(fake_recognizer: FakeRecognizer) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "recognizer": "idle"}


def test_scan_endpoint_returns_extraction(fake_recognizer: FakeRecognizer, light_image_bytes: bytes) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.post("/scan", files={"file": ("receipt.png", light_image_bytes, "image/png")})
        health = client.get("/health").json()

    assert response.status_code == 200
    data = response.json()
    assert data["merchant"] == "STARBUCKS COFFEE"
    assert data["date"] == "2024-03-05"
    assert data["amount"] == 45000
    assert data["currency"] == "IDR"
    assert data["transactionType"] == "expense"
    assert data["items"] == [{"name": "Cappuccino", "price": 45000}]
    assert data["rawText"].startswith("STARBUCKS COFFEE")
    assert health["recognizer"] == "active"


def test_scan_endpoint_shares_one_recognizer_and_releases_on_shutdown(
    fake_recognizer: FakeRecognizer, light_image_bytes: bytes
) -> None:
    created: list[FakeRecognizer] = []

    def factory() -> FakeRecognizer:
        created.append(fake_recognizer)
        return fake_recognizer

    with TestClient(create_app(factory, enhance_url=None)) as client:
        for _ in range(3):
            assert client.post("/scan", files={"file": ("r.png", light_image_bytes, "image/png")}).status_code == 200
        assert not fake_recognizer.closed

    assert len(created) == 1
    assert len(fake_recognizer.calls) == 3
    assert fake_recognizer.closed


def test_scan_endpoint_accepts_compression_fields(fake_recognizer: FakeRecognizer, light_image_bytes: bytes) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.post(
            "/scan",
            files={"file": ("receipt.png", light_image_bytes, "image/png")},
            data={"max_width": "20", "quality": "70"},
        )

    assert response.status_code == 200


def test_scan_endpoint_rejects_bad_quality(fake_recognizer: FakeRecognizer, light_image_bytes: bytes) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.post(
            "/scan",
            files={"file": ("receipt.png", light_image_bytes, "image/png")},
            data={"quality": "0"},
        )

    assert response.status_code == 422


def test_scan_endpoint_maps_recognizer_failure_to_422(light_image_bytes: bytes) -> None:
    failing = FakeRecognizer(error="Failed to connect to OCR service")

    with TestClient(create_app(lambda: failing, enhance_url=None)) as client:
        response = client.post("/scan", files={"file": ("receipt.png", light_image_bytes, "image/png")})

    assert response.status_code == 422
    assert response.json()["status"] == "error"
    assert "Failed to connect" in response.json()["message"]


def test_scan_endpoint_rejects_empty_upload(fake_recognizer: FakeRecognizer) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.post("/scan", files={"file": ("empty.jpg", b"", "image/jpeg")})

    assert response.status_code == 400
    assert fake_recognizer.calls == []


def test_scan_endpoint_requires_file(fake_recognizer: FakeRecognizer) -> None:
    with TestClient(create_app(lambda: fake_recognizer, enhance_url=None)) as client:
        response = client.post("/scan", data={"quality": "80"})

    assert response.status_code == 422
