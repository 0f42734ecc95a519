"""Utility helpers."""

from datetime import datetime
import re
from typing import Optional
from uuid import uuid4

FRIENDLY_DATE_FMT = "%A %b %d %Y"
MINUTES_PER_DAY = 24 * 60


def new_trip_id() -> str:
    """Return a random 9-character uppercase reference code."""

    return uuid4().hex[:9].upper()


def truncate_summary(summary: str, max_words: int = 30, max_sentences: int = 2) -> str:
    text = summary.replace("\n", " ").strip()
    sentence_parts = re.split(r'(?<=[.!?])\s+', text)
    sentence_parts = [s for s in sentence_parts if s]
    if len(sentence_parts) > max_sentences:
        sentence_parts = sentence_parts[:max_sentences]
    truncated = " ".join(sentence_parts)
    words = truncated.split()
    if len(words) > max_words:
        truncated = " ".join(words[:max_words]) + "…"
    return truncated


def parse_local_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a wall-clock datetime, dropping any UTC offset it carries."""

    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.strptime(text, "%Y-%m-%d %I:%M %p")
        except ValueError:
            return None
    return parsed.replace(tzinfo=None)


def calc_block_time_minutes(departure: Optional[str], arrival: Optional[str]) -> Optional[int]:
    """Minutes from departure to arrival local time.

    A negative difference is read as an unstated overnight rollover and gets
    one day added. Legs longer than 24 hours are not representable this way.
    """

    dep = parse_local_datetime(departure)
    arr = parse_local_datetime(arrival)
    if dep is None or arr is None:
        return None
    minutes = (arr - dep).total_seconds() / 60
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    return int(round(minutes))


def format_block_time(minutes: Optional[int]) -> str:
    if minutes is None:
        return "TBD"
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {mins:02d}m"


def _parse_iso(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        if "T" in value:
            return datetime.fromisoformat(value)
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return None


def format_friendly_date(value: str) -> str:
    """Return a user-friendly date heading like 'Monday Nov 24 2025'."""

    parsed = _parse_iso(value)
    if not parsed:
        return value
    return parsed.strftime(FRIENDLY_DATE_FMT)


def format_friendly_time(value: str) -> str:
    """Return '2:30 PM' for an ISO datetime, or the input unchanged."""

    parsed = _parse_iso(value)
    if not parsed or "T" not in value:
        return value
    return parsed.strftime("%I:%M %p").lstrip("0")

