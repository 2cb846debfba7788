from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.appointment import Appointment


class CalendarPort(ABC):
    @abstractmethod
    def add_event(self, appointment: Appointment) -> str:
        """Create calendar event for the appointment. Returns event_id."""
        raise NotImplementedError

    @abstractmethod
    def remove_event(self, appointment: Appointment) -> int:
        """Remove events matching the appointment. Returns number removed."""
        raise NotImplementedError


def event_matches_appointment(title: str | None, start: datetime, appointment: Appointment) -> bool:
    """
    No event id is kept on the appointment, so events are matched by title
    (service name and provider name both present) and by calendar day.
    """
    if not title:
        return False
    if appointment.service_name and appointment.provider_name:
        exact = title == appointment.calendar_title
        loose = appointment.service_name in title and appointment.provider_name in title
        if not (exact or loose):
            return False
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", appointment.date or "")
    if match:
        year, month, day = (int(part) for part in match.groups())
        if (start.year, start.month, start.day) != (year, month, day):
            return False
    return True
