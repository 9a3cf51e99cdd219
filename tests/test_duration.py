"""
UAS Bot - Duration Utility Tests
================================
"""

import pytest

from src.utils.duration import format_duration, parse_duration


class TestParseDuration:
    """Tests for parse_duration function."""

    @pytest.mark.parametrize("raw,expected", [
        ("10m", 600),
        ("1h", 3600),
        ("2d", 172800),
        ("1w", 604800),
        ("1d12h", 129600),
        ("2 hours", 7200),
        ("30", 1800),
        ("45s", 45),
    ])
    def test_valid(self, raw, expected):
        assert parse_duration(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "abc", "0m", "0", "10x"])
    def test_invalid(self, raw):
        assert parse_duration(raw) is None


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_units(self):
        assert format_duration(3661) == "1h 1m"
        assert format_duration(129600) == "1d 12h"
        assert format_duration(30) == "< 1m"

    def test_permanent_and_zero(self):
        assert format_duration(None) == "Permanent"
        assert format_duration(0) == "0m"

    def test_max_units(self):
        assert format_duration(694860, max_units=2) == "1w 1d"
