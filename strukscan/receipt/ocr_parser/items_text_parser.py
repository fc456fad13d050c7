"""Text-line based receipt item extraction."""

import re

from strukscan.domain.extraction import ExtractedItem

from ..keywords import DEFAULT_KEYWORDS, ReceiptKeywords
from .common import parse_decimal_comma_number

MIN_ITEM_LINE_LENGTH = 5

# "<name> <price>" with the price as the last token of the line
ITEM_LINE_PATTERN = re.compile(r"^(.+?)\s+([\d.,]+)$")
# Leading quantity like "2x Kopi Susu" or "2 x Kopi Susu"
QUANTITY_PREFIX_PATTERN = re.compile(r"^(\d+)\s*[xX]\s*(.+)")


def _extract_items(lines: list[str], keywords: ReceiptKeywords = DEFAULT_KEYWORDS) -> list[ExtractedItem]:
    """
    Extract line items from receipt.

    This is heuristic-based: every line ending in a number that is not a
    summary, address or identifier line is treated as an item. Lines whose
    price does not parse are dropped without stopping the scan.

    Args:
        lines: List of text lines from the receipt
        keywords: Keyword configuration (item-skip, address, exclude lists)
    """
    items: list[ExtractedItem] = []

    for line in lines:
        trimmed = line.strip()
        if len(trimmed) < MIN_ITEM_LINE_LENGTH:
            continue
        if keywords.is_item_skip(trimmed):
            continue
        # "Jl. Sudirman No. 1" and "Telp 0812..." end in numbers but are not items
        if keywords.is_address(trimmed) or keywords.is_identifier(trimmed):
            continue

        match = ITEM_LINE_PATTERN.match(trimmed)
        if not match:
            continue

        name = match.group(1).strip()
        price = parse_decimal_comma_number(match.group(2))
        if price is None or price <= 0 or len(name) < 2:
            continue

        quantity = None
        qty_match = QUANTITY_PREFIX_PATTERN.match(name)
        if qty_match:
            quantity = int(qty_match.group(1))
            name = qty_match.group(2).strip()
            if quantity <= 0:
                quantity = None

        items.append(ExtractedItem(name=name, price=price, quantity=quantity))

    return items
