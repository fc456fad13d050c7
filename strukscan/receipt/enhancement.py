"""Merge an external AI enhancement override into a heuristic result.

The enhancement service receives the raw OCR text and answers with a JSON
object shaped like::

    {
      "merchant": "Indomaret",
      "date": "2026-01-15",
      "amount": 79700,            # "totalAmount" is accepted as well
      "currency": "IDR",
      "transactionType": "expense",
      "items": [{"name": "Aqua 600ml", "price": 3500, "quantity": 2}],
      "confidence": 0.92
    }

Values that break the ExtractionResult invariants are dropped, so the
heuristic value survives for that field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from strukscan.domain.extraction import (
    TRANSACTION_TYPES,
    ExtractedItem,
    ExtractionResult,
    TransactionType,
    is_currency_code,
    is_iso_date,
)


@dataclass(frozen=True)
class EnhancementOverride:
    """Validated override values; None means "keep the heuristic value"."""

    merchant: str | None = None
    date: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    transaction_type: TransactionType | None = None
    items: tuple[ExtractedItem, ...] | None = None
    confidence: float | None = None


def _to_positive_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def _parse_items(raw_items: Any) -> tuple[ExtractedItem, ...] | None:
    if not isinstance(raw_items, list) or not raw_items:
        return None

    items: list[ExtractedItem] = []
    for raw in raw_items:
        if not isinstance(raw, Mapping):
            continue
        name = str(raw.get("name") or "").strip()
        price = _to_positive_decimal(raw.get("price"))
        if not name or price is None:
            continue
        quantity = raw.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            quantity = None
        items.append(ExtractedItem(name=name, price=price, quantity=quantity))
    return tuple(items) or None


def _parse_confidence(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return None
    if not 0.0 <= confidence <= 1.0:
        return None
    return confidence


def parse_enhancement_payload(data: Mapping[str, Any]) -> EnhancementOverride:
    """Validate an enhancement service response into an EnhancementOverride."""
    merchant = data.get("merchant")
    merchant = merchant.strip() if isinstance(merchant, str) else None

    date = data.get("date")
    if not isinstance(date, str) or not is_iso_date(date.strip()):
        date = None
    else:
        date = date.strip()

    amount = data.get("amount")
    if amount is None:
        amount = data.get("totalAmount")

    currency = data.get("currency")
    if isinstance(currency, str) and is_currency_code(currency.strip().upper()):
        currency = currency.strip().upper()
    else:
        currency = None

    transaction_type = data.get("transactionType")
    if transaction_type not in TRANSACTION_TYPES:
        transaction_type = None

    return EnhancementOverride(
        merchant=merchant or None,
        date=date,
        amount=_to_positive_decimal(amount),
        currency=currency,
        transaction_type=transaction_type,
        items=_parse_items(data.get("items")),
        confidence=_parse_confidence(data.get("confidence")),
    )


def apply_enhancement(result: ExtractionResult, override: EnhancementOverride) -> ExtractionResult:
    """Return a new result where every present override value supersedes the heuristic one."""
    return replace(
        result,
        merchant=override.merchant or result.merchant,
        date=override.date or result.date,
        amount=override.amount if override.amount is not None else result.amount,
        currency=override.currency or result.currency,
        transaction_type=override.transaction_type or result.transaction_type,
        items=override.items if override.items is not None else result.items,
        confidence=override.confidence if override.confidence is not None else result.confidence,
    )
