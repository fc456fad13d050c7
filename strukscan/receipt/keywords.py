"""Ranked keyword lists used by the receipt field extractors.

All lists are ordered tuples. Where order matters (total keywords), a lower
index means a higher priority. Lists are plain data so that locales can be
added or tuned through ``config/receipt_keywords.toml`` without code changes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

# Priority order: lower index wins when several total lines carry an amount.
TOTAL_KEYWORDS = (
    "grand total",
    "total",
    "subtotal",
    "jumlah",
    "bayar",
    "amount due",
    "to pay",
    "net amount",
    "total bayar",
    "total harga",
)

# Lines carrying these are account/phone/order/tax-id numbers, never prices.
EXCLUDE_KEYWORDS = (
    "rekening",
    "account",
    "rek",
    "no.",
    "nomor",
    "telp",
    "phone",
    "hp",
    "wa",
    "order",
    "invoice",
    "ref",
    "trx",
    "id",
    "npwp",
    "nik",
    "ktp",
    "bca",
    "bni",
    "mandiri",
    "bri",
    "cimb",
    "permata",
    "danamon",
    "bank",
    "customer",
    "pelanggan",
)

# Summary rows that must not become line items.
ITEM_SKIP_KEYWORDS = (
    "total",
    "subtotal",
    "jumlah",
    "tax",
    "pajak",
    "service",
    "diskon",
    "discount",
)

ADDRESS_MARKERS = ("jl.", "jln.", "street", "road", "ave")

INCOME_KEYWORDS_ID = ("uang masuk", "terima", "diterima", "masuk", "receive")
EXPENSE_KEYWORDS_ID = ("uang keluar", "bayar", "dibayar", "keluar", "payment", "pembelian")
INCOME_KEYWORDS_EN = ("received", "income", "credited", "deposit")
EXPENSE_KEYWORDS_EN = ("paid", "payment", "purchase", "debit", "spent", "charge")


@dataclass(frozen=True)
class ReceiptKeywords:
    """Keyword configuration shared by all extractors."""

    total: tuple[str, ...] = TOTAL_KEYWORDS
    exclude: tuple[str, ...] = EXCLUDE_KEYWORDS
    item_skip: tuple[str, ...] = ITEM_SKIP_KEYWORDS
    address_markers: tuple[str, ...] = ADDRESS_MARKERS
    income_id: tuple[str, ...] = INCOME_KEYWORDS_ID
    expense_id: tuple[str, ...] = EXPENSE_KEYWORDS_ID
    income_en: tuple[str, ...] = INCOME_KEYWORDS_EN
    expense_en: tuple[str, ...] = EXPENSE_KEYWORDS_EN

    def total_priority(self, line: str) -> int | None:
        """Return the index of the highest-priority total keyword in line."""
        lower = line.lower()
        for index, keyword in enumerate(self.total):
            if keyword in lower:
                return index
        return None

    def is_excluded(self, line: str) -> bool:
        """Return True if line contains any exclude keyword (substring match)."""
        lower = line.lower()
        return any(keyword in lower for keyword in self.exclude)

    def is_identifier(self, line: str) -> bool:
        """Return True if an exclude keyword appears in line as a whole word.

        Item lines use this stricter check so that names such as
        "Fried Rice" are not dropped for containing "id".
        """
        lower = line.lower()
        return any(_keyword_pattern(keyword).search(lower) for keyword in self.exclude)

    def is_item_skip(self, line: str) -> bool:
        lower = line.lower()
        return any(keyword in lower for keyword in self.item_skip)

    def is_address(self, line: str) -> bool:
        lower = line.lower()
        return any(_marker_pattern(marker).search(lower) for marker in self.address_markers)


_PATTERN_CACHE: dict[tuple[str, bool], re.Pattern[str]] = {}


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    key = (keyword, True)
    pattern = _PATTERN_CACHE.get(key)
    if pattern is None:
        pattern = re.compile(r"(?<![a-z])" + re.escape(keyword.lower()) + r"(?![a-z])")
        _PATTERN_CACHE[key] = pattern
    return pattern


def _marker_pattern(marker: str) -> re.Pattern[str]:
    # Address markers only need a word start ("ave" matches "Avenue", not "Dave").
    key = (marker, False)
    pattern = _PATTERN_CACHE.get(key)
    if pattern is None:
        pattern = re.compile(r"(?<![a-z])" + re.escape(marker.lower()))
        _PATTERN_CACHE[key] = pattern
    return pattern


DEFAULT_KEYWORDS = ReceiptKeywords()

_LIST_NAMES = frozenset(f.name for f in fields(ReceiptKeywords))


def build_receipt_keywords(
    overrides: Mapping[str, Any] | None = None,
    base: ReceiptKeywords = DEFAULT_KEYWORDS,
) -> ReceiptKeywords:
    """Return keyword configuration with lists replaced from overrides.

    Unknown keys raise ``ValueError``; list entries are lower-cased and
    stripped, preserving their order.
    """
    if not overrides:
        return base

    unknown = sorted(set(overrides) - _LIST_NAMES)
    if unknown:
        raise ValueError(f"Unknown keyword lists: {', '.join(unknown)}")

    changes: dict[str, tuple[str, ...]] = {}
    for name, values in overrides.items():
        if isinstance(values, str) or not isinstance(values, (list, tuple)):
            raise ValueError(f"Keyword list '{name}' must be a list of strings")
        cleaned = tuple(str(value).strip().lower() for value in values if str(value).strip())
        changes[name] = cleaned
    return replace(base, **changes)
