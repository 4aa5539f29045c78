"""Day-key normalization for free-form activity timestamps.

The activities feed mixes several timestamp conventions, e.g.
``"Monday, 8 September, 2025 - 07:45"`` from the committed sheet and ISO
strings from the fetcher. Every one of them is reduced to an ``MMDD`` day key.

The year is dropped from the key, so the same month/day in different years
share a bucket. Challenges run for a few weeks, and existing consumers key on
``MMDD``; keep it that way.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from src.challenge.schemas import ActivityRecord

UNKNOWN_DAY = "Unknown"

# Checked in order; the first non-empty field is the one parsed
DATE_FIELDS = ("date", "date_committed", "date_fetch", "daymonth")

_WHITESPACE_RUN = re.compile(r"\s+")
_DAYMONTH = re.compile(r"^\d{4}$")
_DASH_SEPARATOR = " - "

_DATE_FORMATS = (
    "%A, %d %B, %Y",
    "%A, %d %B %Y",
    "%a, %d %b, %Y",
    "%a, %d %b %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%d %B, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%Y-%m-%d",
)

_TIME_FORMATS = (
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I:%M%p",
    "%I:%M:%S %p",
)


@dataclass(frozen=True)
class NormalizedDate:
    """Result of a successful timestamp parse."""

    day_key: str
    formatted_date: str
    parsed: Optional[datetime] = None


def _clean(raw: str) -> str:
    cleaned = _WHITESPACE_RUN.sub(" ", raw).strip()
    if _DASH_SEPARATOR in cleaned:
        cleaned = cleaned.replace(_DASH_SEPARATOR, " ", 1)
    return cleaned


def _parse_datetime(text: str) -> Optional[datetime]:
    """Try ISO 8601 first, then the known human formats with optional time."""
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format)
        except ValueError:
            pass
        for time_format in _TIME_FORMATS:
            try:
                return datetime.strptime(text, f"{date_format} {time_format}")
            except ValueError:
                continue
    return None


def _from_daymonth(text: str) -> Optional[NormalizedDate]:
    month, day = int(text[:2]), int(text[2:])
    try:
        # Leap year so that 0229 is accepted
        datetime(2000, month, day)
    except ValueError:
        return None
    return NormalizedDate(day_key=text, formatted_date=f"{text[:2]}/{text[2:]}")


def normalize_date(raw: Optional[str]) -> Optional[NormalizedDate]:
    """Reduce a free-form timestamp to its ``MMDD`` day key.

    Parameters
    ----------
    raw : str | None
        Timestamp as received from the feed

    Returns
    -------
    NormalizedDate | None
        Day key and ``MM/DD`` label, or None when the value is missing or
        cannot be parsed. Never raises.
    """
    if not raw or not isinstance(raw, str):
        return None

    try:
        text = _clean(raw)
        if not text:
            return None

        if _DAYMONTH.match(text):
            return _from_daymonth(text)

        parsed = _parse_datetime(text)
        if parsed is None:
            logger.debug("Unparseable activity date", raw=raw, cleaned=text)
            return None

        month = f"{parsed.month:02d}"
        day = f"{parsed.day:02d}"
        return NormalizedDate(
            day_key=f"{month}{day}",
            formatted_date=f"{month}/{day}",
            parsed=parsed,
        )
    except Exception as e:
        logger.warning("Failed to parse activity date", raw=raw, error=str(e))
        return None


def pick_date_field(record: ActivityRecord) -> Optional[str]:
    """Return the first non-empty date field of a record."""
    for field_name in DATE_FIELDS:
        value = getattr(record, field_name)
        if value:
            return value
    return None


def resolve_day_key(record: ActivityRecord) -> str:
    """Day key for a record, or ``UNKNOWN_DAY`` when it has no usable date."""
    normalized = normalize_date(pick_date_field(record))
    return normalized.day_key if normalized else UNKNOWN_DAY
