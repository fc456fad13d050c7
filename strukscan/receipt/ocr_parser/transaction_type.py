"""Income/expense classification from receipt text."""

import re
from collections.abc import Callable

from strukscan.domain.extraction import DEFAULT_TRANSACTION_TYPE, TransactionType

from ..keywords import DEFAULT_KEYWORDS, ReceiptKeywords

# Signed Rupiah amounts as shown by e-wallet and bank transfer screens:
# "+Rp50.000" is money in, "-Rp400.000" is money out.
_PLUS_RUPIAH = re.compile(r"\+\s*Rp\.?\s*[\d.,]+", re.IGNORECASE)
_MINUS_RUPIAH = re.compile(r"-\s*Rp\.?\s*[\d.,]+", re.IGNORECASE)

TypeRule = Callable[[str, str, ReceiptKeywords], bool]


def _has_plus_rupiah(text: str, lower: str, _keywords: ReceiptKeywords) -> bool:
    return bool(_PLUS_RUPIAH.search(text)) or "+rp" in lower


def _has_minus_rupiah(text: str, lower: str, _keywords: ReceiptKeywords) -> bool:
    return bool(_MINUS_RUPIAH.search(text)) or "-rp" in lower


def _keyword_rule(attr: str) -> TypeRule:
    def rule(_text: str, lower: str, keywords: ReceiptKeywords) -> bool:
        return any(keyword in lower for keyword in getattr(keywords, attr))

    rule.__name__ = f"has_{attr}_keyword"
    return rule


# Decision list, first matching rule wins.
TRANSACTION_TYPE_RULES: tuple[tuple[TypeRule, TransactionType], ...] = (
    (_has_plus_rupiah, "income"),
    (_has_minus_rupiah, "expense"),
    (_keyword_rule("income_id"), "income"),
    (_keyword_rule("expense_id"), "expense"),
    (_keyword_rule("income_en"), "income"),
    (_keyword_rule("expense_en"), "expense"),
)


def _extract_transaction_type(full_text: str, keywords: ReceiptKeywords = DEFAULT_KEYWORDS) -> TransactionType:
    """Classify receipt text as income or expense (default: expense)."""
    lower = full_text.lower()
    for rule, transaction_type in TRANSACTION_TYPE_RULES:
        if rule(full_text, lower, keywords):
            return transaction_type
    return DEFAULT_TRANSACTION_TYPE
