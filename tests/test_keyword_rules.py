"""Tests for keyword configuration data and TOML overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from strukscan.receipt.keywords import (
    DEFAULT_KEYWORDS,
    EXCLUDE_KEYWORDS,
    TOTAL_KEYWORDS,
    build_receipt_keywords,
)
from strukscan.runtime.keyword_rules import load_receipt_keywords


def test_total_keyword_priority_order() -> None:
    assert TOTAL_KEYWORDS[:3] == ("grand total", "total", "subtotal")
    assert DEFAULT_KEYWORDS.total_priority("GRAND TOTAL Rp 10.000") == 0
    assert DEFAULT_KEYWORDS.total_priority("Total Rp 10.000") == 1
    assert DEFAULT_KEYWORDS.total_priority("SUBTOTAL 9.000") == 1
    assert DEFAULT_KEYWORDS.total_priority("Sub-jumlah 9.000") == 3
    assert DEFAULT_KEYWORDS.total_priority("Total Bayar Rp 10.000") == 1
    assert DEFAULT_KEYWORDS.total_priority("Cappuccino 45.000") is None


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("No. Rek: 1234567890123", True),
        ("Telp. 021-5551234", True),
        ("Order ID 88123", True),
        ("BCA Virtual Account", True),
        ("Total IDR 45.000", True),
        ("Amount paid 11.97", True),
        ("Nasi Goreng Spesial 25.000", False),
        ("TOTAL Rp 45.000", False),
    ],
)
def test_exclude_keywords_match_substrings(line: str, expected: bool) -> None:
    assert DEFAULT_KEYWORDS.is_excluded(line) is expected


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("Telp 021 5551234", True),
        ("ID Transaksi 2024081512345678", True),
        ("Fried Rice 32.000", False),
        ("Kwetiau Goreng 28.000", False),
    ],
)
def test_identifier_lines_need_whole_word_keywords(line: str, expected: bool) -> None:
    assert DEFAULT_KEYWORDS.is_identifier(line) is expected


def test_exclude_list_covers_indonesian_banks() -> None:
    assert {"bca", "bni", "mandiri", "bri", "rekening", "npwp"} <= set(EXCLUDE_KEYWORDS)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("Jl. Sudirman No. 1", True),
        ("JLN. Thamrin 5", True),
        ("1440 Broadway Ave", True),
        ("221B Baker Street", True),
        ("Dave's Deli", False),
    ],
)
def test_address_markers(line: str, expected: bool) -> None:
    assert DEFAULT_KEYWORDS.is_address(line) is expected


def test_build_receipt_keywords_replaces_named_lists() -> None:
    keywords = build_receipt_keywords({"total": [" TOTAL BELANJA ", "Total"], "exclude": []})

    assert keywords.total == ("total belanja", "total")
    assert keywords.exclude == ()
    assert keywords.item_skip == DEFAULT_KEYWORDS.item_skip


def test_build_receipt_keywords_rejects_unknown_lists() -> None:
    with pytest.raises(ValueError, match="Unknown keyword lists: totals"):
        build_receipt_keywords({"totals": ["total"]})


def test_build_receipt_keywords_rejects_non_list_values() -> None:
    with pytest.raises(ValueError, match="must be a list"):
        build_receipt_keywords({"total": "total"})


def test_load_receipt_keywords_defaults_without_config() -> None:
    assert load_receipt_keywords() is DEFAULT_KEYWORDS


def test_load_receipt_keywords_from_project_config(isolated_project_home: Path) -> None:
    config_dir = isolated_project_home / "config"
    config_dir.mkdir()
    (config_dir / "receipt_keywords.toml").write_text(
        '[keywords]\ntotal = ["total belanja", "grand total", "total"]\nincome_id = ["masuk"]\n',
        encoding="utf-8",
    )

    keywords = load_receipt_keywords()

    assert keywords.total == ("total belanja", "grand total", "total")
    assert keywords.income_id == ("masuk",)
    assert keywords.exclude == DEFAULT_KEYWORDS.exclude


def test_load_receipt_keywords_explicit_path(tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    path.write_text('[keywords]\nitem_skip = ["ongkir"]\n', encoding="utf-8")

    assert load_receipt_keywords(str(path)).item_skip == ("ongkir",)


def test_load_receipt_keywords_rejects_non_table(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('keywords = ["total"]\n', encoding="utf-8")

    with pytest.raises(ValueError, match="must be a table"):
        load_receipt_keywords(str(path))
