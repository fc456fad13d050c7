"""Tests for income/expense classification."""

from __future__ import annotations

import pytest

from strukscan.receipt.keywords import build_receipt_keywords
from strukscan.receipt.ocr_parser import _extract_transaction_type


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Transfer Berhasil\n+Rp50.000", "income"),
        ("Transfer Berhasil\n-Rp400.000", "expense"),
        ("+ Rp 50.000", "income"),
        ("Uang Masuk\nRp 75.000", "income"),
        ("Dana diterima dari BUDI", "income"),
        ("Pembelian Pulsa\nRp 25.000", "expense"),
        ("Payment received", "income"),
        ("Amount credited to your wallet", "income"),
        ("Amount paid 11.97", "expense"),
        ("STARBUCKS COFFEE\nCappuccino 45.000", "expense"),
        ("", "expense"),
    ],
)
def test_extract_transaction_type(text: str, expected: str) -> None:
    assert _extract_transaction_type(text) == expected


def test_signed_amount_beats_keywords() -> None:
    assert _extract_transaction_type("Pembayaran\n+Rp100.000") == "income"
    assert _extract_transaction_type("Uang Masuk\n-Rp100.000") == "expense"


def test_indonesian_keywords_beat_english_keywords() -> None:
    assert _extract_transaction_type("Bayar tagihan\nDeposit") == "expense"


def test_terima_anywhere_reads_as_income() -> None:
    text = "TOKO ABC\nTotal Rp 10.000\nTerima kasih"
    assert _extract_transaction_type(text) == "income"


def test_custom_income_keywords() -> None:
    keywords = build_receipt_keywords({"income_en": ["refund"]})
    assert _extract_transaction_type("Refund issued", keywords) == "income"
