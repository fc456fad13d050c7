"""Data models for receipt field extraction."""

import re
from dataclasses import dataclass
from datetime import date as _date
from decimal import Decimal
from typing import Any, Literal

TransactionType = Literal["income", "expense"]

TRANSACTION_TYPES: tuple[TransactionType, ...] = ("income", "expense")
DEFAULT_TRANSACTION_TYPE: TransactionType = "expense"

# Currencies with dedicated amount patterns. Other 3-letter codes pass through.
SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "SGD", "IDR")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


class ExtractionFailed(RuntimeError):
    """Raised when no raw text can be produced for an image."""


def is_iso_date(value: str) -> bool:
    """Return True if value is a zero-padded YYYY-MM-DD calendar date."""
    if not _ISO_DATE.match(value):
        return False
    try:
        _date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_currency_code(value: str) -> bool:
    return bool(_CURRENCY_CODE.match(value))


@dataclass(frozen=True)
class ExtractedItem:
    """A single line item recovered from receipt text."""

    name: str
    price: Decimal
    quantity: int | None = None  # None when the line carried no "2x" prefix

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"Item price must be positive: {self.price}")
        if self.quantity is not None and self.quantity <= 0:
            raise ValueError(f"Item quantity must be positive: {self.quantity}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "price": float(self.price)}
        if self.quantity is not None:
            data["quantity"] = self.quantity
        return data


@dataclass(frozen=True)
class ExtractionResult:
    """Structured transaction candidate derived from one receipt image.

    Every field except ``raw_text`` and ``transaction_type`` is optional:
    a mostly-empty result is still a valid result.
    """

    raw_text: str
    merchant: str | None = None
    date: str | None = None  # YYYY-MM-DD
    amount: Decimal | None = None
    currency: str | None = None
    confidence: float = 0.0  # 0..1
    items: tuple[ExtractedItem, ...] = ()
    transaction_type: TransactionType = DEFAULT_TRANSACTION_TYPE

    def __post_init__(self) -> None:
        if self.merchant == "":
            raise ValueError("Merchant must be None rather than empty")
        if self.date is not None and not is_iso_date(self.date):
            raise ValueError(f"Date must be a valid YYYY-MM-DD date: {self.date!r}")
        if self.amount is not None and self.amount <= 0:
            raise ValueError(f"Amount must be positive: {self.amount}")
        if self.currency is not None and not is_currency_code(self.currency):
            raise ValueError(f"Currency must be a 3-letter code: {self.currency!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1]: {self.confidence}")
        if self.transaction_type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type: {self.transaction_type!r}")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable form used by API consumers."""
        return {
            "rawText": self.raw_text,
            "merchant": self.merchant,
            "date": self.date,
            "amount": float(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "confidence": self.confidence,
            "items": [item.to_dict() for item in self.items],
            "transactionType": self.transaction_type,
        }
