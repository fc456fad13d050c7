"""Text recognizer adapters and the handle that owns their lifecycle.

A recognizer turns image bytes into raw text plus a 0-100 confidence.
Recognizers are expensive to start (model load, connection pool) and not
safe for overlapping calls, so callers hold one ``RecognizerHandle``:
the recognizer is created on first use, calls are serialized, and it is
closed only when the owner calls ``release()``.

Usage:
    handle = RecognizerHandle(create_recognizer_factory("service", ocr_url))
    with handle:
        recognized = handle.recognize(image_bytes)
"""

from __future__ import annotations

import io
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Protocol

import httpx

from strukscan.receipt.ocr_helpers import transform_ocr_service_result
from strukscan.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_SERVICE_URL = "http://localhost:8001"
DEFAULT_OCR_TIMEOUT = 60.0
TESSERACT_LANGUAGES = "eng+ind"  # receipts mix English and Indonesian
TESSERACT_CONFIG = "--psm 6"

RECOGNIZER_ENGINES = ("service", "tesseract")


class OCRServiceUnavailable(RuntimeError):
    """Raised when the recognizer cannot be reached or cannot read the image."""


@dataclass(frozen=True)
class RecognizedText:
    """Recognizer output for one image."""

    text: str
    confidence: float  # 0..100


class Recognizer(Protocol):
    """Minimal contract every recognizer adapter provides."""

    def recognize(self, image_bytes: bytes) -> RecognizedText: ...

    def close(self) -> None: ...


class OCRServiceRecognizer:
    """Recognizer backed by an HTTP OCR service (``POST /ocr``, PaddleOCR-style response)."""

    def __init__(
        self,
        ocr_url: str = DEFAULT_OCR_SERVICE_URL,
        timeout: float = DEFAULT_OCR_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.ocr_url = ocr_url.rstrip("/")
        self._client = httpx.Client(base_url=self.ocr_url, timeout=timeout, transport=transport)

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        logger.info("Sending receipt to OCR service at %s...", self.ocr_url)
        start_time = time.time()
        try:
            response = self._client.post(
                "/ocr",
                files={"file": ("receipt.jpg", image_bytes, "image/jpeg")},
            )
        except httpx.RequestError as e:
            logger.error("Failed to connect to OCR service: %s", e)
            raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)

        if response.status_code != 200:
            # Response body may echo receipt text; log the status only.
            logger.error("OCR service error: %s", response.status_code)
            raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

        try:
            text, confidence = transform_ocr_service_result(response.json())
        except (ValueError, TypeError, KeyError, IndexError) as e:
            raise OCRServiceUnavailable(f"Malformed OCR service response: {e}") from e
        return RecognizedText(text=text, confidence=confidence)

    def close(self) -> None:
        self._client.close()


def _mean_tesseract_confidence(data: dict[str, Any]) -> float:
    confidences: list[float] = []
    for raw in data.get("conf", []):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        # Tesseract reports -1 for layout blocks without text
        if value >= 0:
            confidences.append(value)
    return sum(confidences) / len(confidences) if confidences else 0.0


class TesseractRecognizer:
    """Recognizer backed by a local Tesseract install (via pytesseract)."""

    def __init__(self, languages: str = TESSERACT_LANGUAGES, config: str = TESSERACT_CONFIG) -> None:
        import pytesseract

        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OCRServiceUnavailable(f"Tesseract is not installed: {e}") from e
        logger.info("Using Tesseract %s with languages %s", version, languages)

        self._pytesseract = pytesseract
        self.languages = languages
        self.config = config

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        from PIL import Image, UnidentifiedImageError

        pytesseract = self._pytesseract
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                text = pytesseract.image_to_string(img, lang=self.languages, config=self.config)
                data = pytesseract.image_to_data(
                    img, lang=self.languages, config=self.config, output_type=pytesseract.Output.DICT
                )
        except (UnidentifiedImageError, OSError) as e:
            raise OCRServiceUnavailable(f"Unreadable image: {e}") from e
        except pytesseract.TesseractError as e:
            raise OCRServiceUnavailable(f"Tesseract failed: {e}") from e
        return RecognizedText(text=text, confidence=_mean_tesseract_confidence(data))

    def close(self) -> None:
        # pytesseract spawns one process per call; nothing to tear down.
        return None


RecognizerFactory = Callable[[], Recognizer]


def create_recognizer_factory(
    engine: str = "service",
    ocr_url: str = DEFAULT_OCR_SERVICE_URL,
    timeout: float = DEFAULT_OCR_TIMEOUT,
) -> RecognizerFactory:
    """Return a factory for the named recognizer engine ("service" or "tesseract")."""
    if engine == "service":
        return lambda: OCRServiceRecognizer(ocr_url=ocr_url, timeout=timeout)
    if engine == "tesseract":
        return TesseractRecognizer
    raise ValueError(f"Unknown recognizer engine: {engine!r} (expected one of {', '.join(RECOGNIZER_ENGINES)})")


class RecognizerHandle:
    """Owns one recognizer: lazy acquire, serialized recognition, explicit release."""

    def __init__(self, factory: RecognizerFactory) -> None:
        self._factory = factory
        self._recognizer: Recognizer | None = None
        self._lock = threading.Lock()

    @property
    def is_active(self) -> bool:
        """True while a recognizer instance is alive."""
        return self._recognizer is not None

    def _acquire_locked(self) -> Recognizer:
        if self._recognizer is None:
            start_time = time.time()
            self._recognizer = self._factory()
            logger.info("Recognizer initialized in %.2f seconds", time.time() - start_time)
        return self._recognizer

    def acquire(self) -> Recognizer:
        """Return the recognizer, creating it on first use."""
        with self._lock:
            return self._acquire_locked()

    def recognize(self, image_bytes: bytes) -> RecognizedText:
        """Recognize one image. Concurrent callers wait for each other."""
        with self._lock:
            return self._acquire_locked().recognize(image_bytes)

    def release(self) -> None:
        """Close the recognizer. The next call to acquire() creates a new one."""
        with self._lock:
            if self._recognizer is None:
                return
            recognizer, self._recognizer = self._recognizer, None
            recognizer.close()
            logger.info("Recognizer released")

    def __enter__(self) -> RecognizerHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
