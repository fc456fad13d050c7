"""Receipt scan workflow orchestration."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from strukscan.domain.extraction import ExtractionFailed, ExtractionResult
from strukscan.runtime import get_logger, load_receipt_keywords
from strukscan.runtime.receipt_pipeline import enhance_extraction, extract_receipt_data

if TYPE_CHECKING:
    from strukscan.receipt.image_preprocess import ImageSource
    from strukscan.receipt.keywords import ReceiptKeywords
    from strukscan.runtime.recognizer import RecognizerHandle

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "extraction_failed",
    "extracted",
    "enhanced",
]

Enhancer = Callable[[ExtractionResult, str], tuple[ExtractionResult, bool]]
ProgressCallback = Callable[[int, int, "ReceiptScanResult"], None]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image: ImageSource
    max_width: int | None = None
    quality: int | None = None
    enhance_url: str | None = None
    keywords: ReceiptKeywords | None = None
    enhance: Enhancer | None = None

    @property
    def label(self) -> str:
        """Short human-readable name for the image source."""
        if isinstance(self.image, bytes):
            return f"<{len(self.image)} bytes>"
        if isinstance(self.image, str) and self.image.startswith("data:"):
            return "<data URI>"
        return str(self.image)


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    source: str
    result: ExtractionResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def _missing_file(image: ImageSource) -> Path | None:
    if isinstance(image, bytes):
        return None
    if isinstance(image, str) and image.startswith("data:"):
        return None
    path = Path(image)
    return None if path.exists() else path


def run_receipt_scan(request: ReceiptScanRequest, handle: RecognizerHandle) -> ReceiptScanResult:
    """Run scan flow: load -> preprocess -> recognize -> parse -> optional enhancement."""
    missing = _missing_file(request.image)
    if missing is not None:
        return ReceiptScanResult(
            status="file_not_found",
            source=request.label,
            error=f"Receipt file not found: {missing}",
        )

    try:
        result = extract_receipt_data(
            request.image,
            handle,
            max_width=request.max_width,
            quality=request.quality,
            keywords=request.keywords or load_receipt_keywords(),
        )
    except ExtractionFailed as exc:
        return ReceiptScanResult(
            status="extraction_failed",
            source=request.label,
            error=str(exc),
        )

    if request.enhance_url:
        enhance = request.enhance or enhance_extraction
        result, enhanced = enhance(result, request.enhance_url)
        if enhanced:
            return ReceiptScanResult(status="enhanced", source=request.label, result=result)

    return ReceiptScanResult(status="extracted", source=request.label, result=result)


def run_batch_scan(
    requests: Sequence[ReceiptScanRequest],
    handle: RecognizerHandle,
    on_progress: ProgressCallback | None = None,
    should_continue: Callable[[], bool] | None = None,
) -> list[ReceiptScanResult]:
    """
    Scan images one after another against a single recognizer handle.

    Each image finishes (including any enhancement) before the next one
    starts. ``on_progress(current, total, result)`` fires after every image;
    ``should_continue()`` is checked before every image and a False answer
    stops the batch, returning the results collected so far.

    The handle is not released here; its owner decides when to release it.
    """
    total = len(requests)
    results: list[ReceiptScanResult] = []

    for index, request in enumerate(requests):
        if should_continue is not None and not should_continue():
            logger.info("Batch stopped after %d of %d receipts", index, total)
            break

        result = run_receipt_scan(request, handle)
        results.append(result)
        if on_progress is not None:
            on_progress(index + 1, total, result)

    return results
