"""Total amount and currency extraction."""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from ..keywords import DEFAULT_KEYWORDS, ReceiptKeywords
from .common import (
    is_reasonable_amount,
    parse_decimal_comma_number,
    parse_indonesian_number,
    parse_western_number,
)

NumberParser = Callable[[str], Decimal | None]

# Bare "12.34" at the end of a line is read as USD only below this value.
USD_TAIL_LIMIT = Decimal("10000")

_WESTERN_NUMBER = r"(\d[\d,]*(?:\.\d{1,2})?)"
_GROUPED_NUMBER = r"(\d[\d.,]*)"

# Generic trailing numbers, used only when no currency marker matched.
_PRICE_AT_END = re.compile(r"(?:^|[\s:])(\d[\d,]*\.\d{2})\s*$")
_GROUPED_AT_END = re.compile(r"(?:^|[\s:])(\d[\d.]*)\s*$")


@dataclass(frozen=True)
class AmountMatch:
    """A monetary amount found on a receipt line."""

    amount: Decimal
    currency: str


@dataclass(frozen=True)
class CurrencyFamily:
    """Patterns for one currency, tried in order: symbol, ISO prefix, ISO suffix."""

    currency: str
    patterns: tuple[re.Pattern[str], ...]
    parse: NumberParser


def _family(currency: str, symbol: str, number: str, parse: NumberParser) -> CurrencyFamily:
    return CurrencyFamily(
        currency=currency,
        patterns=(
            re.compile(symbol + r"\s*" + number, re.IGNORECASE),
            re.compile(r"\b" + currency + r"\s*" + number, re.IGNORECASE),
            re.compile(number + r"\s*" + currency + r"\b", re.IGNORECASE),
        ),
        parse=parse,
    )


# Priority order matters: the first family with a positive match wins.
CURRENCY_FAMILIES: tuple[CurrencyFamily, ...] = (
    # "$" but not "S$" (Singapore dollar); "US$" is accepted.
    _family("USD", r"(?<![A-Za-z])(?:US)?\$", _WESTERN_NUMBER, parse_western_number),
    _family("EUR", r"€", _GROUPED_NUMBER, parse_decimal_comma_number),
    _family("GBP", r"£", _WESTERN_NUMBER, parse_western_number),
    _family("SGD", r"(?<![A-Za-z])S\$", _WESTERN_NUMBER, parse_western_number),
    _family("IDR", r"Rp\.?", _GROUPED_NUMBER, parse_indonesian_number),
)


def match_currency_amount(
    line: str,
    strict: bool = False,
    families: Sequence[CurrencyFamily] = CURRENCY_FAMILIES,
) -> AmountMatch | None:
    """
    Extract an amount and its currency from a single line.

    Currency families are tried in priority order; within a family the
    symbol form is tried before the ISO prefix and ISO suffix forms.

    Args:
        line: Text line to search
        strict: If True, only amounts with an explicit currency symbol or
            ISO code are returned (no bare-number fallback)
        families: Currency pattern table to use

    Returns:
        AmountMatch or None if the line carries no usable amount
    """
    for family in families:
        for pattern in family.patterns:
            match = pattern.search(line)
            if not match:
                continue
            amount = family.parse(match.group(1))
            if amount is not None and amount > 0:
                return AmountMatch(amount=amount, currency=family.currency)

    if strict:
        return None

    # Western price column: "Total 11.97"
    match = _PRICE_AT_END.search(line)
    if match:
        amount = parse_western_number(match.group(1))
        if amount is not None and 0 < amount < USD_TAIL_LIMIT:
            return AmountMatch(amount=amount, currency="USD")

    # Indonesian price column: "Total 45.000"
    match = _GROUPED_AT_END.search(line)
    if match:
        amount = parse_indonesian_number(match.group(1))
        if amount is not None and is_reasonable_amount(amount, "IDR"):
            return AmountMatch(amount=amount, currency="IDR")

    return None


def _extract_total(
    lines: list[str],
    keywords: ReceiptKeywords = DEFAULT_KEYWORDS,
    families: Sequence[CurrencyFamily] = CURRENCY_FAMILIES,
) -> AmountMatch | None:
    """
    Extract the receipt total and its currency.

    Phase A: lines containing a total keyword; the amount on the line with
    the highest-priority keyword wins (first line on ties).
    Phase B: only when Phase A found nothing, the largest currency-marked
    amount that passes the reasonableness filter (first line on ties).

    Lines carrying an exclude keyword (account, phone, order numbers...)
    are ignored by both phases.
    """
    candidate_lines = [line for line in lines if not keywords.is_excluded(line)]

    best: AmountMatch | None = None
    best_priority: int | None = None
    for line in candidate_lines:
        priority = keywords.total_priority(line)
        if priority is None:
            continue
        if best_priority is not None and priority >= best_priority:
            continue
        found = match_currency_amount(line, strict=False, families=families)
        if found is not None:
            best = found
            best_priority = priority

    if best is not None:
        return best

    # Phase B. Known limitation: without a total line, a large item or
    # subtotal can win since nothing reconciles against the item sum.
    largest: AmountMatch | None = None
    for line in candidate_lines:
        found = match_currency_amount(line, strict=True, families=families)
        if found is None or not is_reasonable_amount(found.amount, found.currency):
            continue
        if largest is None or found.amount > largest.amount:
            largest = found
    return largest
