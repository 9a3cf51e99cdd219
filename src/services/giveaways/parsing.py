"""
UAS Bot - Giveaway Parsing
==========================

Date/time option parsing, embed scraping for recovery, and winner draws.
"""

import random
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import discord


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")
PRIZE_PATTERN = re.compile(r"\*\*Prize:\*\*\s*(.+?)(?:\n|$)")
TIMESTAMP_PATTERN = re.compile(r"<t:(\d+):")
MENTION_PATTERN = re.compile(r"<@!?(\d+)>")

INVALID_DATETIME_MESSAGE = (
    "❌ Invalid date/time format. Use YYYY-MM-DD for date and HH:MM for time (24-hour format)."
)
PAST_DATETIME_MESSAGE = "❌ End date/time must be in the future."


def parse_end_datetime(date_str: Optional[str], time_str: Optional[str]) -> Optional[datetime]:
    """
    Parse "YYYY-MM-DD" + "HH:MM" (24h) as a UTC datetime.

    Returns:
        Aware datetime, or None if either part is malformed.
    """
    if not date_str or not time_str:
        return None

    date_str = date_str.strip()
    time_str = time_str.strip()
    if not DATE_PATTERN.match(date_str) or not TIME_PATTERN.match(time_str):
        return None

    try:
        parsed = datetime.strptime(f"{date_str} {time_str}", "%Y-%m-%d %H:%M")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def parse_mentions(text: Optional[str]) -> List[int]:
    """Extract user IDs from <@id> / <@!id> mentions, keeping order."""
    if not text:
        return []
    seen: List[int] = []
    for match in MENTION_PATTERN.finditer(text):
        user_id = int(match.group(1))
        if user_id not in seen:
            seen.append(user_id)
    return seen


def extract_prize(description: Optional[str]) -> Optional[str]:
    """Pull the prize out of a giveaway embed description."""
    if not description:
        return None
    match = PRIZE_PATTERN.search(description)
    return match.group(1).strip() if match else None


def extract_end_timestamp(embed: discord.Embed) -> Optional[int]:
    """
    Find the end time in a giveaway embed.

    Fields whose name mentions "Ends" are checked first, then the
    description. Returns unix seconds or None.
    """
    for field in embed.fields:
        if field.name and "Ends" in field.name and field.value:
            match = TIMESTAMP_PATTERN.search(field.value)
            if match:
                return int(match.group(1))

    if embed.description:
        match = TIMESTAMP_PATTERN.search(embed.description)
        if match:
            return int(match.group(1))

    for field in embed.fields:
        if field.value:
            match = TIMESTAMP_PATTERN.search(field.value)
            if match:
                return int(match.group(1))

    return None


def pick_winners(participants: Iterable[int], count: int, rng: Optional[random.Random] = None) -> List[int]:
    """Draw up to `count` distinct winners."""
    pool = sorted(set(participants))
    if not pool or count <= 0:
        return []
    chooser = rng or random
    return chooser.sample(pool, min(count, len(pool)))


__all__ = [
    "INVALID_DATETIME_MESSAGE",
    "PAST_DATETIME_MESSAGE",
    "parse_end_datetime",
    "parse_mentions",
    "extract_prize",
    "extract_end_timestamp",
    "pick_winners",
]
