"""
UAS Bot - Duration Utilities
============================

Parsing and formatting of short duration strings used by /mute and /ban.

Usage:
    from src.utils.duration import parse_duration, format_duration

    seconds = parse_duration("1d12h")   # 129600
    display = format_duration(129600)   # "1d 12h"
"""

import re
from typing import Optional

from src.core.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE


SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY

TIME_MULTIPLIERS = {
    "w": SECONDS_PER_WEEK,
    "d": SECONDS_PER_DAY,
    "h": SECONDS_PER_HOUR,
    "m": SECONDS_PER_MINUTE,
    "s": 1,
}

TIME_UNIT_ALIASES = {
    "weeks": "w", "week": "w",
    "days": "d", "day": "d",
    "hours": "h", "hour": "h", "hrs": "h", "hr": "h",
    "minutes": "m", "minute": "m", "mins": "m", "min": "m",
    "seconds": "s", "second": "s", "secs": "s", "sec": "s",
}

DURATION_SUGGESTIONS = [
    ("10 Minutes", "10m"),
    ("1 Hour", "1h"),
    ("6 Hours", "6h"),
    ("1 Day", "1d"),
    ("1 Week", "1w"),
    ("28 Days", "28d"),
]

_COMBINED = re.compile(r"(?:(\d+)w)?(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?")


def _normalize(duration_str: str) -> str:
    """Lowercase, map unit words to letters and drop whitespace."""
    result = duration_str.lower().strip()
    for word, short in sorted(TIME_UNIT_ALIASES.items(), key=lambda x: -len(x[0])):
        result = re.sub(rf"(?<=\d)\s*{word}\b", short, result)
    return result.replace(" ", "")


def parse_duration(duration_str: Optional[str]) -> Optional[int]:
    """
    Parse a duration string into seconds.

    Accepts "10m", "1h", "2d", "1w", combinations such as "1d12h",
    and unit words ("2 hours"). A bare number means minutes.

    Returns:
        Seconds, or None when the string is empty or invalid.
    """
    if not duration_str:
        return None

    normalized = _normalize(duration_str)
    if not normalized:
        return None

    if normalized.isdigit():
        value = int(normalized) * SECONDS_PER_MINUTE
        return value if value > 0 else None

    match = _COMBINED.fullmatch(normalized)
    if not match or not any(match.groups()):
        return None

    weeks, days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    total = (
        weeks * SECONDS_PER_WEEK +
        days * SECONDS_PER_DAY +
        hours * SECONDS_PER_HOUR +
        minutes * SECONDS_PER_MINUTE +
        seconds
    )
    return total if total > 0 else None


def format_duration(seconds: Optional[int], max_units: int = 3) -> str:
    """
    Format seconds as "1d 12h 30m".

    Examples:
        >>> format_duration(3661)
        '1h 1m'
        >>> format_duration(30)
        '< 1m'
    """
    if seconds is None:
        return "Permanent"
    seconds = int(seconds)
    if seconds <= 0:
        return "0m"
    if seconds < SECONDS_PER_MINUTE:
        return "< 1m"

    parts = []
    for suffix, size in (("w", SECONDS_PER_WEEK), ("d", SECONDS_PER_DAY),
                         ("h", SECONDS_PER_HOUR), ("m", SECONDS_PER_MINUTE)):
        if seconds >= size and len(parts) < max_units:
            value, seconds = divmod(seconds, size)
            parts.append(f"{value}{suffix}")

    return " ".join(parts)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "DURATION_SUGGESTIONS",
    "parse_duration",
    "format_duration",
]
