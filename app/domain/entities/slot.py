from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True)
class TimeOfDay:
    """Clock time. Equality is equality of the 24-hour form."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            raise ValueError(f"Invalid time of day: {self.hour}:{self.minute}")

    @property
    def as_24h(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def display(self) -> str:
        meridiem = "PM" if self.hour >= 12 else "AM"
        hour = self.hour % 12 or 12
        return f"{hour}:{self.minute:02d} {meridiem}"

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    @classmethod
    def from_minutes(cls, total_minutes: int) -> TimeOfDay:
        return cls(hour=total_minutes // 60, minute=total_minutes % 60)

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class CalendarDate:
    """YYYY-MM-DD built from explicit fields, never from a parsed datetime string."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # date() rejects month 13, Feb 30 and friends
        date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: date) -> CalendarDate:
        return cls(year=value.year, month=value.month, day=value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def plus_days(self, days: int) -> CalendarDate:
        return CalendarDate.from_date(self.to_date() + timedelta(days=days))

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def weekday_name(self) -> str:
        return self.to_date().strftime("%A").lower()

    def __str__(self) -> str:
        return self.iso


@dataclass(frozen=True)
class AvailabilitySlot:
    """One bookable unit for one provider.

    `time` keeps whatever textual form the source produced (display form for
    computed slots, either form for stored ones); compare through
    `time_normalizer.equal_times`, never with `==` on the raw string.
    """

    date: str  # YYYY-MM-DD
    time: str
