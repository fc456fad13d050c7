"""Merchant and date extraction helpers."""

import re
from collections.abc import Callable
from datetime import date

from ..keywords import DEFAULT_KEYWORDS, ReceiptKeywords

# How many non-trivial lines from the top may hold the merchant name
MERCHANT_SEARCH_LINES = 3

_DATE_LIKE = re.compile(r"\d{2}[/-]\d{2}[/-]\d{2,4}")
_MERCHANT_NOISE = re.compile(r"[^A-Za-z0-9 '&-]")


def _extract_merchant(lines: list[str], keywords: ReceiptKeywords = DEFAULT_KEYWORDS) -> str | None:
    """
    Extract merchant name from the top of the receipt.

    The first of the top three lines that does not start with a digit,
    look like an address, or look like a date wins. Falls back to the very
    first line when none qualifies.
    """
    candidates = [line.strip() for line in lines if len(line.strip()) > 2]
    if not candidates:
        return None

    for line in candidates[:MERCHANT_SEARCH_LINES]:
        if line[0].isdigit():
            continue
        if keywords.is_address(line):
            continue
        if _DATE_LIKE.search(line):
            continue
        cleaned = _MERCHANT_NOISE.sub("", line).strip()
        if cleaned:
            return cleaned

    return candidates[0]


DateNormalizer = Callable[[re.Match[str]], date | None]

ENGLISH_MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

INDONESIAN_MONTHS = {
    "januari": 1,
    "februari": 2,
    "maret": 3,
    "april": 4,
    "mei": 5,
    "juni": 6,
    "juli": 7,
    "agustus": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "desember": 12,
    # Abbreviations printed by Indonesian POS systems
    "agt": 8,
    "agu": 8,
    "okt": 10,
    "des": 12,
}


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _day_month_year(match: re.Match[str]) -> date | None:
    # Fixed DD/MM/YYYY policy: "05/03/2024" is 5 March, never May 3.
    day, month, year = (int(g) for g in match.groups())
    return _safe_date(year, month, day)


def _year_month_day(match: re.Match[str]) -> date | None:
    year, month, day = (int(g) for g in match.groups())
    return _safe_date(year, month, day)


def _month_name(table: dict[str, int], prefix_len: int | None) -> DateNormalizer:
    def normalize(match: re.Match[str]) -> date | None:
        day_str, month_str, year_str = match.groups()
        key = month_str.lower()
        if prefix_len is not None:
            key = key[:prefix_len]
        month = table.get(key)
        if month is None:
            return None
        return _safe_date(int(year_str), month, int(day_str))

    return normalize


_ENGLISH_MONTH_NAMES = (
    "January|February|March|April|May|June|July|August|September|October|November|December|"
    "Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec"
)
_INDONESIAN_MONTH_NAMES = "|".join(sorted(INDONESIAN_MONTHS, key=len, reverse=True))

# Ordered by priority: the first family with a valid match anywhere wins.
DATE_PATTERNS: tuple[tuple[str, re.Pattern[str], DateNormalizer], ...] = (
    ("day_month_year", re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4})(?!\d)"), _day_month_year),
    ("year_month_day", re.compile(r"(?<!\d)(\d{4})[/-](\d{1,2})[/-](\d{1,2})(?!\d)"), _year_month_day),
    (
        "english_month",
        re.compile(rf"(?<!\d)(\d{{1,2}})\s+({_ENGLISH_MONTH_NAMES})\.?\s+(\d{{4}})(?!\d)", re.IGNORECASE),
        _month_name(ENGLISH_MONTHS, prefix_len=3),
    ),
    (
        "indonesian_month",
        re.compile(rf"(?<!\d)(\d{{1,2}})\s+({_INDONESIAN_MONTH_NAMES})\.?\s+(\d{{4}})(?!\d)", re.IGNORECASE),
        _month_name(INDONESIAN_MONTHS, prefix_len=None),
    ),
)


def _extract_date(full_text: str) -> str | None:
    """Extract transaction date as YYYY-MM-DD (None if unknown)."""
    for _name, pattern, normalize in DATE_PATTERNS:
        for match in pattern.finditer(full_text):
            found = normalize(match)
            if found is not None:
                return found.isoformat()
    return None
