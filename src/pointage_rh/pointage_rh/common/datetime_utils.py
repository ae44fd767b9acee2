from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time
from typing import Union

from ..core.exceptions import InvalidTimeFormat, ValidationError

TimeLike = Union[str, time, datetime]

_TIME_OF_DAY = re.compile(r"^[0-9]{1,2}:[0-9]{2}(:[0-9]{2})?$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Date invalide: {value!r} (format attendu AAAA-MM-JJ)")


def parse_month(value: str) -> tuple[date, date]:
    """Parse a YYYY-MM string into the first and last day of that month."""
    try:
        first = datetime.strptime((value or "").strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Mois invalide: {value!r} (format attendu AAAA-MM)")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_time_of_day(value: TimeLike) -> time:
    """Convert "HH:MM", "HH:MM:SS", time or datetime into a time.

    Raises InvalidTimeFormat for anything else; a malformed value is never
    treated as midnight.
    """

    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Heure invalide: {value!r}")

    text = value.strip()
    if not _TIME_OF_DAY.match(text):
        raise InvalidTimeFormat(f"Heure invalide: {value!r}")

    numbers = [int(p) for p in text.split(":")]
    hours, minutes = numbers[0], numbers[1]
    seconds = numbers[2] if len(numbers) == 3 else 0
    try:
        return time(hour=hours, minute=minutes, second=seconds)
    except ValueError:
        raise InvalidTimeFormat(f"Heure invalide: {value!r}")


def to_fractional_hour(value: TimeLike) -> float:
    """Hour of day as a float (08:30 -> 8.5). Seconds are ignored."""
    t = parse_time_of_day(value)
    return t.hour + t.minute / 60


def format_hhmm(value: time | None) -> str:
    return value.strftime("%H:%M") if value else "-"
