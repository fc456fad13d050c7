"""Core domain models for receipt extraction.

This module provides the data models shared by the parser, the runtime
adapters and the outer surfaces:
- ExtractionResult, ExtractedItem: the per-image extraction value
- ExtractionFailed: terminal failure when no raw text can be produced

Usage:
    from strukscan.domain import ExtractionResult, ExtractedItem
"""

from strukscan.domain.extraction import (
    DEFAULT_TRANSACTION_TYPE,
    SUPPORTED_CURRENCIES,
    ExtractedItem,
    ExtractionFailed,
    ExtractionResult,
    TransactionType,
)

__all__ = [
    "DEFAULT_TRANSACTION_TYPE",
    "SUPPORTED_CURRENCIES",
    "ExtractedItem",
    "ExtractionFailed",
    "ExtractionResult",
    "TransactionType",
]
