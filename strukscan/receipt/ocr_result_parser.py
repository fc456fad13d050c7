"""Parse raw OCR text into a structured ExtractionResult."""

from strukscan.domain.extraction import ExtractionResult

from .keywords import DEFAULT_KEYWORDS, ReceiptKeywords
from .ocr_parser import (
    _extract_date,
    _extract_items,
    _extract_merchant,
    _extract_total,
    _extract_transaction_type,
)
from .ocr_parser.common import split_lines


def rescale_confidence(confidence: float) -> float:
    """Map a recognizer confidence on the 0-100 scale to [0, 1]."""
    return max(0.0, min(1.0, float(confidence) / 100.0))


def parse_receipt_text(
    raw_text: str,
    confidence: float = 0.0,
    keywords: ReceiptKeywords | None = None,
) -> ExtractionResult:
    """
    Parse recognizer output into an ExtractionResult.

    This is a best-effort parser - any field may come back as None, and the
    result should be reviewed before it is recorded.

    Args:
        raw_text: Text returned by the recognizer, unmodified
        confidence: Recognizer confidence on a 0-100 scale
        keywords: Optional keyword configuration (defaults to built-in lists)

    Returns:
        ExtractionResult with parsed data
    """
    keywords = keywords or DEFAULT_KEYWORDS
    lines = split_lines(raw_text)

    total = _extract_total(lines, keywords)

    return ExtractionResult(
        raw_text=raw_text,
        merchant=_extract_merchant(lines, keywords),
        date=_extract_date(raw_text),
        amount=total.amount if total else None,
        currency=total.currency if total else None,
        confidence=rescale_confidence(confidence),
        items=tuple(_extract_items(lines, keywords)),
        transaction_type=_extract_transaction_type(raw_text, keywords),
    )
