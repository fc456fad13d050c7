"""Runtime helpers for the receipt extraction pipeline (non-HTTP)."""

from __future__ import annotations

import time

import httpx

from strukscan.domain.extraction import ExtractionFailed, ExtractionResult
from strukscan.receipt.enhancement import EnhancementOverride, apply_enhancement, parse_enhancement_payload
from strukscan.receipt.image_preprocess import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_WIDTH,
    ImageSource,
    compress_image_bytes,
    load_image_bytes,
    preprocess_image_bytes,
)
from strukscan.receipt.keywords import ReceiptKeywords
from strukscan.receipt.ocr_result_parser import parse_receipt_text
from strukscan.runtime.logging import get_logger
from strukscan.runtime.recognizer import OCRServiceUnavailable, RecognizerHandle

logger = get_logger(__name__)

MIN_ENHANCEMENT_TEXT_LENGTH = 10
DEFAULT_ENHANCEMENT_TIMEOUT = 30.0


class EnhancementUnavailable(RuntimeError):
    """Raised when the enhancement service cannot be reached or returns an error."""


def extract_receipt_data(
    image: ImageSource,
    handle: RecognizerHandle,
    *,
    max_width: int | None = None,
    quality: int | None = None,
    keywords: ReceiptKeywords | None = None,
) -> ExtractionResult:
    """
    Run one image through preprocessing, recognition and parsing.

    When either max_width or quality is given the image is downscaled and
    re-encoded first; the missing one takes its default.

    Raises:
        ExtractionFailed: if the image cannot be read or the recognizer fails
    """
    image_bytes = load_image_bytes(image)

    if max_width is not None or quality is not None:
        image_bytes = compress_image_bytes(
            image_bytes,
            max_width=max_width if max_width is not None else DEFAULT_MAX_WIDTH,
            quality=quality if quality is not None else DEFAULT_JPEG_QUALITY,
        )
    image_bytes = preprocess_image_bytes(image_bytes)

    start_time = time.time()
    try:
        recognized = handle.recognize(image_bytes)
    except OCRServiceUnavailable as e:
        logger.error("Text recognition failed: %s", e)
        raise ExtractionFailed(f"Text recognition failed: {e}") from e
    logger.info(
        "Recognized %d characters in %.2f seconds (confidence %.1f)",
        len(recognized.text),
        time.time() - start_time,
        recognized.confidence,
    )

    return parse_receipt_text(recognized.text, confidence=recognized.confidence, keywords=keywords)


def call_enhancement_service(
    raw_text: str,
    url: str,
    timeout: float = DEFAULT_ENHANCEMENT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> EnhancementOverride:
    """
    Ask the enhancement service to re-read raw OCR text.

    Sends ``{"rawText": raw_text}`` as JSON and validates the response.

    Raises:
        EnhancementUnavailable: on short text, network errors, non-200
            responses or bodies that are not a JSON object
    """
    if len(raw_text.strip()) < MIN_ENHANCEMENT_TEXT_LENGTH:
        raise EnhancementUnavailable("Text too short for enhancement")

    logger.info("Sending OCR text to enhancement service at %s...", url)
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.post(url, json={"rawText": raw_text})
    except httpx.RequestError as e:
        raise EnhancementUnavailable(f"Failed to connect to enhancement service: {e}") from e

    if response.status_code != 200:
        raise EnhancementUnavailable(f"Enhancement service error: {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise EnhancementUnavailable(f"Enhancement service returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise EnhancementUnavailable("Enhancement service returned a non-object response")

    return parse_enhancement_payload(data)


def enhance_extraction(
    result: ExtractionResult,
    url: str,
    timeout: float = DEFAULT_ENHANCEMENT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> tuple[ExtractionResult, bool]:
    """
    Merge the enhancement service's answer on top of a heuristic result.

    Returns:
        Tuple of (result, enhanced). On any enhancement failure the heuristic
        result comes back unchanged with enhanced=False.
    """
    try:
        override = call_enhancement_service(result.raw_text, url, timeout=timeout, transport=transport)
    except EnhancementUnavailable as e:
        logger.warning("Enhancement skipped, keeping heuristic result: %s", e)
        return result, False
    return apply_enhancement(result, override), True
