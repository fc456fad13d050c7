"""Composable OCR receipt parser components."""

from .amount_parser import CURRENCY_FAMILIES, AmountMatch, CurrencyFamily, _extract_total, match_currency_amount
from .fields_parser import DATE_PATTERNS, _extract_date, _extract_merchant
from .items_text_parser import _extract_items
from .transaction_type import TRANSACTION_TYPE_RULES, _extract_transaction_type

__all__ = [
    "CURRENCY_FAMILIES",
    "DATE_PATTERNS",
    "TRANSACTION_TYPE_RULES",
    "AmountMatch",
    "CurrencyFamily",
    "_extract_date",
    "_extract_items",
    "_extract_merchant",
    "_extract_total",
    "_extract_transaction_type",
    "match_currency_amount",
]
