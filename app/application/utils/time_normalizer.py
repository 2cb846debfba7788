from __future__ import annotations

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.application.exceptions import DateOutOfRange, InvalidDateOrTime
from app.domain.entities.slot import CalendarDate, TimeOfDay

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_NARROW_SPACES = re.compile(r"[\u00a0\u2007\u2009\u202f]")
_TIME_24 = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12 = re.compile(r"^(\d{1,2}):(\d{2})\s*(am|pm)$", re.IGNORECASE)
_HOUR_12 = re.compile(r"^(\d{1,2})\s*(am|pm)$", re.IGNORECASE)
_TIME_TOKEN = re.compile(
    r"\b(\d{1,2}:\d{2}\s*[ap]m|\d{1,2}\s*[ap]m|\d{1,2}:\d{2})\b",
    re.IGNORECASE,
)
_DATE_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_ISO = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def clean_spaces(text: str) -> str:
    """Fold non-breaking/narrow spaces into plain spaces and collapse runs."""
    return re.sub(r"\s+", " ", _NARROW_SPACES.sub(" ", text or "")).strip()


def normalize_display(raw: str) -> TimeOfDay | None:
    """Parse `H:MM`, `HH:MM`, `H:MM AM/PM` or `H AM/PM`. Returns None if unrecognized."""
    text = clean_spaces(raw)

    match = _TIME_24.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour <= 23 and minute <= 59:
            return TimeOfDay(hour, minute)
        return None

    match = _TIME_12.match(text)
    if match:
        return _from_12_hour(int(match.group(1)), int(match.group(2)), match.group(3))

    match = _HOUR_12.match(text)
    if match:
        return _from_12_hour(int(match.group(1)), 0, match.group(2))

    return None


def _from_12_hour(hour: int, minute: int, meridiem: str) -> TimeOfDay | None:
    if not (1 <= hour <= 12 and 0 <= minute <= 59):
        return None
    meridiem = meridiem.upper()
    if meridiem == "PM" and hour != 12:
        hour += 12
    elif meridiem == "AM" and hour == 12:
        hour = 0
    return TimeOfDay(hour, minute)


def to_24_hour(value: TimeOfDay) -> str:
    return value.as_24h


def any_to_24(value: str | TimeOfDay | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, TimeOfDay):
        return value.as_24h
    parsed = normalize_display(value)
    return parsed.as_24h if parsed else None


def equal_times(a: str | TimeOfDay | None, b: str | TimeOfDay | None) -> bool:
    left = any_to_24(a)
    right = any_to_24(b)
    return left is not None and right is not None and left == right


def extract_time_token(text: str) -> TimeOfDay | None:
    """Find the first recognizable time inside free text ("Friday 9:00 AM" -> 09:00)."""
    for match in _TIME_TOKEN.finditer(clean_spaces(text)):
        parsed = normalize_display(match.group(1))
        if parsed:
            return parsed
    return None


def resolve_day_offset(text: str, reference_date: date) -> int | None:
    """
    "today" -> 0, "tomorrow" -> 1, weekday name -> 1..7 days ahead.

    A bare weekday equal to today's weekday resolves to next week (7),
    never 0, so it cannot be confused with "today".
    """
    lower = clean_spaces(text).lower()
    if re.search(r"\btoday\b", lower):
        return 0
    if re.search(r"\btomorrow\b", lower):
        return 1
    for index, name in enumerate(WEEKDAYS):
        if re.search(rf"\b{name}\b", lower):
            offset = (index - reference_date.weekday()) % 7
            return offset or 7
    return None


def parse_day_and_time(text: str, reference_date: date) -> tuple[CalendarDate, TimeOfDay] | None:
    """Both a day token and a time token are required."""
    requested_time = extract_time_token(text)
    offset = resolve_day_offset(text, reference_date)
    if requested_time is None or offset is None:
        return None
    return CalendarDate.from_date(reference_date).plus_days(offset), requested_time


def today_in(timezone: ZoneInfo, now: datetime | None = None) -> date:
    return (now or datetime.now(timezone)).astimezone(timezone).date()


def compose_appointment_datetime(date_str: str, time_str: str, timezone: ZoneInfo | None = None) -> datetime:
    """
    Build the wall-clock instant of an appointment from its stored fields.

    Components are decomposed and passed to `datetime(...)` one by one so the
    calendar day is never shifted by a UTC round trip.

    Raises:
        InvalidDateOrTime: date is not YYYY-MM-DD or time is not HH:MM(:SS)
        DateOutOfRange: a component is outside its valid range
    """
    date_match = _DATE_ISO.match((date_str or "").strip())
    if not date_match:
        raise InvalidDateOrTime(f"Invalid date format: {date_str!r}")

    time_24 = any_to_24(time_str) or clean_spaces(time_str)
    time_match = _TIME_ISO.match(time_24)
    if not time_match:
        raise InvalidDateOrTime(f"Invalid time format: {time_str!r}")

    year, month, day = (int(part) for part in date_match.groups())
    hour, minute = int(time_match.group(1)), int(time_match.group(2))
    second = int(time_match.group(3) or 0)
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=timezone)
    except ValueError as e:
        raise DateOutOfRange(f"Date or time out of range: {date_str} {time_str} ({e})") from e
