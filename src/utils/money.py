"""
UAS Bot - Money Utilities
=========================

Parsing and formatting of casino currency amounts.

Accepted input:
    "1500", "1,500", "$2.5k", "3m", "1b", "2t", "1q"
    Keywords: all/a/max, half/h, quarter/q... see parse_amount()
"""

import re
from typing import Optional, Union


SUFFIX_MULTIPLIERS = {
    "": 1,
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
    "t": 1_000_000_000_000,
    "q": 1_000_000_000_000_000,
}

KEYWORDS = {
    "all": "all", "a": "all", "allin": "all", "all in": "all", "max": "all",
    "half": "half", "h": "half",
    "quarter": "quarter",
    "min": "min",
}

_AMOUNT = re.compile(r"^(\d+(?:\.\d+)?)\s*([kmbtq]?)$")

_ABBREVIATIONS = (
    (1_000_000_000_000_000, "Q"),
    (1_000_000_000_000, "T"),
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def parse_amount(amount_str: Optional[str]) -> Optional[Union[int, float, str]]:
    """
    Parse an amount string.

    Returns:
        A number, one of the keywords "all", "half", "quarter", "min",
        or None when the input is not a valid non-negative amount.
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    clean = amount_str.strip().lower().replace("$", "")
    if clean in KEYWORDS:
        return KEYWORDS[clean]

    match = _AMOUNT.match(clean.replace(",", ""))
    if not match:
        return None

    number, suffix = match.groups()
    amount = round(float(number) * SUFFIX_MULTIPLIERS[suffix], 2)
    return int(amount) if amount == int(amount) else amount


def parse_signed_amount(amount_str: Optional[str]) -> Optional[int]:
    """
    Parse a numeric amount that may be negative (used by /editmoney).

    Keywords are rejected. Fractions are truncated toward zero.
    """
    if not amount_str:
        return None

    clean = amount_str.strip()
    sign = 1
    if clean.startswith("-"):
        sign = -1
        clean = clean[1:]
    elif clean.startswith("+"):
        clean = clean[1:]

    parsed = parse_amount(clean)
    if parsed is None or isinstance(parsed, str):
        return None
    return sign * int(parsed)


def resolve_amount(amount: Union[int, float, str], wallet: float, min_amount: int = 1) -> Optional[float]:
    """Turn a keyword into a concrete amount against a wallet balance."""
    if isinstance(amount, (int, float)):
        return amount
    if amount == "all":
        return wallet
    if amount == "half":
        return int(wallet / 2 * 100) / 100
    if amount == "quarter":
        return int(wallet / 4 * 100) / 100
    if amount == "min":
        return min_amount
    return None


def _plain(value: float) -> str:
    if value == int(value):
        return f"${int(value):,}"
    return f"${value:,.2f}"


def format_money(amount: Union[int, float, str]) -> str:
    """
    Format an amount compactly.

    Examples:
        >>> format_money(1234567)
        '$1.23M'
        >>> format_money(999)
        '$999'
    """
    try:
        num = float(amount)
    except (TypeError, ValueError):
        return f"${amount}"

    sign = "-" if num < 0 else ""
    num = abs(num)

    for size, suffix in _ABBREVIATIONS:
        if num >= size:
            return f"{sign}${num / size:.2f}{suffix}"
    return f"{sign}{_plain(num)}"


def format_money_full(amount: Union[int, float, str]) -> str:
    """Format an amount with thousands separators and no abbreviation."""
    try:
        num = float(amount)
    except (TypeError, ValueError):
        return f"${amount}"
    sign = "-" if num < 0 else ""
    return f"{sign}{_plain(abs(num))}"


def format_delta(new_amount: float, old_amount: float, abbreviate: bool = True) -> str:
    """Format the change between two amounts with an explicit sign."""
    delta = new_amount - old_amount
    formatter = format_money if abbreviate else format_money_full
    formatted = formatter(abs(delta))
    if delta > 0:
        return f"+{formatted}"
    if delta < 0:
        return f"-{formatted}"
    return formatted


__all__ = [
    "parse_amount",
    "parse_signed_amount",
    "resolve_amount",
    "format_money",
    "format_money_full",
    "format_delta",
]
