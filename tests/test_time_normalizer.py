"""
Tests for parsing day/time phrases and composing appointment datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.application.exceptions import DateOutOfRange, InvalidDateOrTime
from app.application.utils.time_normalizer import (
    WEEKDAYS,
    clean_spaces,
    compose_appointment_datetime,
    equal_times,
    extract_time_token,
    normalize_display,
    parse_day_and_time,
    resolve_day_offset,
    to_24_hour,
    today_in,
)
from app.domain.entities.slot import CalendarDate, TimeOfDay

WEDNESDAY = date(2026, 10, 14)


def test_normalize_display_forms():
    """12-hour, 24-hour and bare-hour forms all land on the same clock time."""
    assert normalize_display("9:00 AM") == TimeOfDay(9, 0)
    assert normalize_display("09:00") == TimeOfDay(9, 0)
    assert normalize_display("9 am") == TimeOfDay(9, 0)
    assert normalize_display("12:30 PM") == TimeOfDay(12, 30)
    assert normalize_display("12:15 AM") == TimeOfDay(0, 15)
    assert normalize_display("4:30 PM").as_24h == "16:30"
    assert normalize_display("13:00 PM") is None
    assert normalize_display("25:00") is None
    assert normalize_display("noon") is None


def test_narrow_spaces_are_folded():
    """Locale formatters put U+202F before AM/PM; it must not break matching."""
    assert clean_spaces("9:00\u202fAM") == "9:00 AM"
    assert normalize_display("9:00\u00a0AM") == TimeOfDay(9, 0)
    assert equal_times("9:00\u202fAM", "09:00")


def test_equal_times_compares_24_hour_form():
    assert equal_times("2:00 PM", "14:00")
    assert not equal_times("2:00 AM", "14:00")
    assert not equal_times("later", "14:00")


def test_extract_time_token_from_free_text():
    assert extract_time_token("Friday 9:00 AM please") == TimeOfDay(9, 0)
    assert extract_time_token("tomorrow at 3pm") == TimeOfDay(15, 0)
    assert extract_time_token("monday 14:30") == TimeOfDay(14, 30)
    assert extract_time_token("sometime friday") is None


def test_resolve_day_offset():
    """Weekday names resolve 1..7 days ahead; today's own weekday means next week."""
    assert resolve_day_offset("today 9am", WEDNESDAY) == 0
    assert resolve_day_offset("Tomorrow 9am", WEDNESDAY) == 1
    assert resolve_day_offset("friday 9am", WEDNESDAY) == 2
    assert resolve_day_offset("monday 9am", WEDNESDAY) == 5
    assert resolve_day_offset("wednesday 9am", WEDNESDAY) == 7
    assert resolve_day_offset("9am", WEDNESDAY) is None


def test_day_words_need_word_boundaries():
    """"today" must not be found inside other words."""
    assert resolve_day_offset("todayish 9am", WEDNESDAY) is None


def test_parse_day_and_time_needs_both_tokens():
    parsed = parse_day_and_time("Friday 9:00 AM", WEDNESDAY)
    assert parsed == (CalendarDate(2026, 10, 16), TimeOfDay(9, 0))
    assert parse_day_and_time("Friday", WEDNESDAY) is None
    assert parse_day_and_time("9:00 AM", WEDNESDAY) is None


def test_parse_crosses_month_end():
    parsed = parse_day_and_time("monday 10:00 AM", date(2026, 10, 29))
    assert parsed is not None
    assert parsed[0].iso == "2026-11-02"


def test_today_in_uses_business_timezone():
    """Late evening UTC on the 15th is still the 14th in Los Angeles."""
    la = ZoneInfo("America/Los_Angeles")
    now = datetime(2026, 10, 15, 2, 0, tzinfo=ZoneInfo("UTC"))
    assert today_in(la, now) == date(2026, 10, 14)


def test_compose_keeps_calendar_day():
    tz = ZoneInfo("America/Los_Angeles")
    start = compose_appointment_datetime("2026-10-16", "11:30 PM", tz)
    assert (start.year, start.month, start.day, start.hour, start.minute) == (2026, 10, 16, 23, 30)
    assert start.tzinfo == tz

    start = compose_appointment_datetime("2026-10-16", "09:00:00")
    assert start == datetime(2026, 10, 16, 9, 0, 0)


def test_compose_rejects_bad_input():
    with pytest.raises(InvalidDateOrTime):
        compose_appointment_datetime("10/16/2026", "09:00")
    with pytest.raises(InvalidDateOrTime):
        compose_appointment_datetime("2026-10-16", "nine")
    with pytest.raises(DateOutOfRange):
        compose_appointment_datetime("2026-02-30", "09:00")
    # DateOutOfRange is a kind of InvalidDateOrTime
    with pytest.raises(InvalidDateOrTime):
        compose_appointment_datetime("2026-13-01", "09:00")


def test_twelve_hour_edges_convert_to_24():
    assert normalize_display("12:00 AM").as_24h == "00:00"
    assert normalize_display("12:00 PM").as_24h == "12:00"
    assert normalize_display("1:05 PM").as_24h == "13:05"


def test_compose_display_time_and_plain_garbage():
    assert compose_appointment_datetime("2025-03-10", "9:00 AM") == datetime(2025, 3, 10, 9, 0)
    with pytest.raises(InvalidDateOrTime):
        compose_appointment_datetime("not-a-date", "9:00 AM")


def test_every_12_hour_time_converts_to_24():
    """All 1440 minutes of the day, written the way the schedule displays them."""
    for hour_24 in range(24):
        for minute in range(60):
            suffix = "AM" if hour_24 < 12 else "PM"
            hour_12 = hour_24 % 12 or 12
            parsed = normalize_display(f"{hour_12}:{minute:02d} {suffix}")
            assert parsed is not None
            assert to_24_hour(parsed) == f"{hour_24:02d}:{minute:02d}"


@pytest.mark.parametrize("reference", [WEDNESDAY + timedelta(days=n) for n in range(7)])
def test_every_weekday_name_lands_on_that_weekday(reference):
    for index, name in enumerate(WEEKDAYS):
        offset = resolve_day_offset(f"{name.capitalize()} 9:00 AM", reference)
        assert 1 <= offset <= 7
        assert (reference + timedelta(days=offset)).weekday() == index
