from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class WorkingHours:
    start: str  # "HH:MM" or display form
    end: str
    interval_minutes: int = 30


@dataclass(frozen=True)
class Provider:
    id: str
    name: str
    address: str | None = None
    phone: str | None = None
    # weekday name ("monday".."sunday") -> works that day
    working_days: dict[str, bool] = field(default_factory=dict)
    working_hours: WorkingHours | None = None


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    price: float | None = None
    duration_minutes: int | None = None


@dataclass(frozen=True)
class UserProfile:
    id: str
    display_name: str = ""
    locality_key: str = ""  # zipcode
