"""Shared pytest fixtures/options for strukscan tests."""

from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from PIL import Image

from strukscan.runtime.keyword_rules import load_receipt_keywords
from strukscan.runtime.paths import reset_paths
from strukscan.runtime.recognizer import OCRServiceUnavailable, RecognizedText


def pytest_addoption(parser):
    """Custom pytest option for receipt e2e tests."""
    parser.addoption(
        "--strukscan-e2e-mode",
        action="store",
        default="cached",
        choices=["cached", "live", "both"],
        help=(
            "Receipt E2E mode for tests/test_e2e_receipts.py: "
            "cached (.txt raw text), live (.jpg -> OCR service), or both."
        ),
    )


@pytest.fixture(autouse=True)
def isolated_project_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point STRUKSCAN_HOME at an empty directory so no local config leaks in."""
    monkeypatch.setenv("STRUKSCAN_HOME", str(tmp_path))
    reset_paths()
    load_receipt_keywords.cache_clear()
    yield tmp_path
    reset_paths()
    load_receipt_keywords.cache_clear()


class FakeRecognizer:
    """In-memory recognizer returning canned text for every image."""

    def __init__(self, text: str = "", confidence: float = 90.0, error: str | None = None) -> None:
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls: list[bytes] = []
        self.closed = False

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        self.calls.append(image_bytes)
        if self.error is not None:
            raise OCRServiceUnavailable(self.error)
        return RecognizedText(text=self.text, confidence=self.confidence)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_recognizer() -> FakeRecognizer:
    return FakeRecognizer(
        text="STARBUCKS COFFEE\nJl. Sudirman No. 1\n05/03/2024\nCappuccino 45.000\nTOTAL Rp 45.000",
        confidence=91.0,
    )


def make_image_bytes(
    color: tuple[int, ...] = (240, 240, 240),
    size: tuple[int, int] = (40, 20),
    mode: str = "RGB",
    fmt: str = "PNG",
) -> bytes:
    """Encode a solid-color image."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def light_image_bytes() -> bytes:
    return make_image_bytes((240, 240, 240))


@pytest.fixture
def receipt_image_path(tmp_path: Path, light_image_bytes: bytes) -> Path:
    path = tmp_path / "receipt.png"
    path.write_bytes(light_image_bytes)
    return path
