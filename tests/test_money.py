"""
UAS Bot - Money Utility Tests
=============================
"""

import pytest

from src.utils.money import (
    format_delta,
    format_money,
    format_money_full,
    parse_amount,
    parse_signed_amount,
    resolve_amount,
)


class TestParseAmount:
    """Tests for parse_amount function."""

    @pytest.mark.parametrize("raw,expected", [
        ("1500", 1500),
        ("1,500", 1500),
        ("$2.5k", 2500),
        ("3m", 3_000_000),
        ("1B", 1_000_000_000),
        ("0.5", 0.5),
    ])
    def test_numbers(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("all", "all"),
        ("MAX", "all"),
        ("h", "half"),
        ("quarter", "quarter"),
    ])
    def test_keywords(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "abc", "-5", "5x", "1.2.3"])
    def test_invalid(self, raw):
        assert parse_amount(raw) is None


class TestSignedAmount:
    """Tests for parse_signed_amount function."""

    def test_negative(self):
        assert parse_signed_amount("-2k") == -2000

    def test_plus_sign(self):
        assert parse_signed_amount("+750") == 750

    def test_keywords_rejected(self):
        assert parse_signed_amount("all") is None


class TestResolveAmount:
    """Tests for resolve_amount function."""

    def test_keywords(self):
        assert resolve_amount("all", 1000) == 1000
        assert resolve_amount("half", 101) == 50.5
        assert resolve_amount("quarter", 1000) == 250
        assert resolve_amount("min", 1000, min_amount=10) == 10

    def test_number_passthrough(self):
        assert resolve_amount(42, 1000) == 42


class TestFormatting:
    """Tests for money formatting."""

    def test_abbreviated(self):
        assert format_money(999) == "$999"
        assert format_money(1234567) == "$1.23M"
        assert format_money(-2500) == "-$2.50K"

    def test_full(self):
        assert format_money_full(1234567) == "$1,234,567"
        assert format_money_full(1234.5) == "$1,234.50"

    def test_non_numeric(self):
        assert format_money("lots") == "$lots"

    def test_delta(self):
        assert format_delta(150, 100) == "+$50"
        assert format_delta(100, 150, abbreviate=False) == "-$50"
        assert format_delta(5, 5) == "$0"
