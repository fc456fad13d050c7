"""Tests for merchant and date extraction."""

from __future__ import annotations

import pytest

from strukscan.receipt.ocr_parser import DATE_PATTERNS, _extract_date, _extract_merchant


def test_merchant_skips_leading_number_line() -> None:
    lines = ["0002394", "TOKO MAJU JAYA", "Jl. Merdeka 10"]
    assert _extract_merchant(lines) == "TOKO MAJU JAYA"


def test_merchant_skips_address_and_date_lines() -> None:
    lines = ["Jl. Sudirman No. 1", "05/03/2024 10:22", "Kopi Kenangan", "Latte 22.000"]
    assert _extract_merchant(lines) == "Kopi Kenangan"


def test_merchant_strips_ocr_noise() -> None:
    assert _extract_merchant(["*** ALFAMART ***", "Cabang Depok"]) == "ALFAMART"


def test_merchant_ignores_short_lines() -> None:
    assert _extract_merchant(["", "  ", "ab", "INDOMARET"]) == "INDOMARET"


def test_merchant_falls_back_to_first_line() -> None:
    lines = ["123 Main Street", "2024-03-05", "0812345678", "Thanks"]
    assert _extract_merchant(lines) == "123 Main Street"


def test_merchant_only_searches_top_lines() -> None:
    lines = ["0001", "0002", "0003", "LATE MERCHANT"]
    assert _extract_merchant(lines) == "0001"


def test_merchant_missing_for_empty_text() -> None:
    assert _extract_merchant([]) is None
    assert _extract_merchant(["", " "]) is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("05/03/2024", "2024-03-05"),
        ("Tanggal: 5-3-2024 14:02", "2024-03-05"),
        ("2024/03/05", "2024-03-05"),
        ("2024-3-5 08:00", "2024-03-05"),
        ("15 Mar 2024", "2024-03-15"),
        ("15 March 2024", "2024-03-15"),
        ("1 Sept. 2023", "2023-09-01"),
        ("17 Agustus 2024", "2024-08-17"),
        ("5 Mei 2024", "2024-05-05"),
        ("31 Des 2023", "2023-12-31"),
        ("1 Januari 2025", "2025-01-01"),
    ],
)
def test_extract_date_formats(text: str, expected: str) -> None:
    assert _extract_date(text) == expected


def test_extract_date_prefers_day_month_year_family() -> None:
    text = "Printed 2024-01-31\nTransaksi 05/03/2024"
    assert _extract_date(text) == "2024-03-05"


def test_extract_date_skips_invalid_calendar_dates() -> None:
    # Fixed DD/MM policy: month 15 is invalid, so the next candidate wins
    assert _extract_date("03/15/2024\n07/03/2024") == "2024-03-07"
    assert _extract_date("31/02/2024") is None


def test_extract_date_ignores_long_digit_runs() -> None:
    assert _extract_date("Ref 123/45/202401") is None


def test_extract_date_missing() -> None:
    assert _extract_date("STARBUCKS COFFEE\nCappuccino 45.000") is None


def test_date_pattern_family_order() -> None:
    assert [name for name, _pattern, _normalize in DATE_PATTERNS] == [
        "day_month_year",
        "year_month_day",
        "english_month",
        "indonesian_month",
    ]
