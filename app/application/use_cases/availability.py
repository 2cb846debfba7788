from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import date

from app.application.ports.directory import DirectoryPort
from app.application.utils.time_normalizer import equal_times, normalize_display
from app.domain.entities.provider import Provider
from app.domain.entities.slot import AvailabilitySlot, CalendarDate, TimeOfDay

COMPUTED = "computed"
STORED = "stored"


def iter_availability(
    provider: Provider,
    reference_date: date,
    window_days: int = 7,
    default_interval: int = 30,
) -> Iterator[AvailabilitySlot]:
    """
    Project a provider's working-hours template over `window_days` days
    starting at `reference_date`. Start is inclusive, end exclusive.
    """
    hours = provider.working_hours
    if hours is None:
        return
    start = normalize_display(hours.start)
    end = normalize_display(hours.end)
    if start is None or end is None:
        return
    interval = hours.interval_minutes or default_interval
    if interval <= 0:
        return

    first_day = CalendarDate.from_date(reference_date)
    for offset in range(window_days):
        day = first_day.plus_days(offset)
        if not provider.working_days.get(day.weekday_name):
            continue
        for minutes in range(start.minutes_since_midnight, end.minutes_since_midnight, interval):
            yield AvailabilitySlot(date=day.iso, time=TimeOfDay.from_minutes(minutes).display)


def compute_availability(
    provider: Provider,
    reference_date: date,
    window_days: int = 7,
    default_interval: int = 30,
) -> list[AvailabilitySlot]:
    return list(iter_availability(provider, reference_date, window_days, default_interval))


def is_slot_available(
    slots: Iterable[AvailabilitySlot],
    requested_date: CalendarDate | str,
    requested_time: TimeOfDay | str,
) -> AvailabilitySlot | None:
    """Matching slot on that day, comparing times in 24-hour form."""
    wanted_date = str(requested_date)
    for slot in slots:
        if slot.date == wanted_date and equal_times(slot.time, requested_time):
            return slot
    return None


def same_day_times(slots: Iterable[AvailabilitySlot], requested_date: CalendarDate | str) -> list[str]:
    wanted_date = str(requested_date)
    return [slot.time for slot in slots if slot.date == wanted_date]


class AvailabilityResolver:
    """Bookable slots for a provider, from the stored list or the working-hours template."""

    def __init__(
        self,
        directory: DirectoryPort,
        source: str = COMPUTED,
        window_days: int = 7,
        default_interval: int = 30,
    ) -> None:
        if source not in (COMPUTED, STORED):
            raise ValueError(f"Unknown availability source: {source}")
        self._directory = directory
        self._source = source
        self._window_days = window_days
        self._default_interval = default_interval
        self._logger = logging.getLogger(__name__)

    def slots_for(self, provider_id: str, reference_date: date) -> list[AvailabilitySlot]:
        if self._source == STORED:
            return self.fetch_availability(provider_id)
        provider = self._directory.fetch_provider(provider_id)
        if provider is None:
            self._logger.warning("Provider not found", extra={"provider_id": provider_id})
            return []
        return compute_availability(provider, reference_date, self._window_days, self._default_interval)

    def fetch_availability(self, provider_id: str) -> list[AvailabilitySlot]:
        return list(self._directory.fetch_provider_availability(provider_id))
