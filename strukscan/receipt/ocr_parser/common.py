"""Shared constants and helpers for OCR receipt parsing."""

import re
from decimal import Decimal, InvalidOperation

# Reasonableness bounds. Indonesian account and phone numbers run to 10+
# digits, so anything above the IDR ceiling is a mis-read identifier.
IDR_MIN_AMOUNT = Decimal("100")
IDR_MAX_AMOUNT = Decimal("50000000")
OTHER_MIN_AMOUNT = Decimal("0.01")
OTHER_MAX_AMOUNT = Decimal("50000")

# Trailing 1-2 digits after a single dot read as decimals ("11.97", "50.5").
_SINGLE_DOT_DECIMAL = re.compile(r"^\d*\.\d{1,2}$")


def split_lines(text: str) -> list[str]:
    """Split raw OCR text into lines, keeping empty lines and whitespace."""
    return text.splitlines()


def _to_decimal(text: str) -> Decimal | None:
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_western_number(num_str: str) -> Decimal | None:
    """Parse "1,234.56" style numbers (comma thousands, dot decimal)."""
    return _to_decimal(num_str.strip().replace(",", ""))


def parse_indonesian_number(num_str: str) -> Decimal | None:
    """
    Parse Indonesian-formatted numbers (dots as thousand separators).

    - "50.000" -> 50000, "1.234.567" -> 1234567
    - "11.97" -> 11.97 (a single dot followed by 1-2 digits is a decimal point)
    - "1,234,567" -> 1234567 (commas present: Western grouping)
    - "1.234.567,00" -> 1234567.00 (dots grouping, trailing decimal comma)

    Returns None when the string is not a number.
    """
    cleaned = num_str.strip().strip(".,")
    dots = cleaned.count(".")
    commas = cleaned.count(",")

    if dots and not commas:
        if dots == 1 and _SINGLE_DOT_DECIMAL.match(cleaned):
            return _to_decimal(cleaned)
        return _to_decimal(cleaned.replace(".", ""))

    if commas:
        if dots and cleaned.rfind(",") > cleaned.rfind("."):
            return _to_decimal(cleaned.replace(".", "").replace(",", "."))
        return _to_decimal(cleaned.replace(",", ""))

    return _to_decimal(cleaned)


def parse_decimal_comma_number(num_str: str) -> Decimal | None:
    """
    Parse numbers that use a comma as the decimal point ("1.234,56").

    Every dot is a thousand separator and the first comma becomes the
    decimal point: "45.000" -> 45000, "3,50" -> 3.50, "12.50" -> 1250.
    """
    return _to_decimal(num_str.strip().replace(".", "").replace(",", ".", 1))


def is_reasonable_amount(amount: Decimal, currency: str | None = None) -> bool:
    """
    Check whether an amount looks like a plausible receipt total.

    IDR (or unknown currency) totals sit between 100 and 50 million; other
    explicit currencies between 0.01 and 50,000.
    """
    if currency and currency != "IDR":
        return OTHER_MIN_AMOUNT <= amount <= OTHER_MAX_AMOUNT
    return IDR_MIN_AMOUNT <= amount <= IDR_MAX_AMOUNT
