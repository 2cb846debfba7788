from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from app.application.ports.calendar import CalendarPort, event_matches_appointment
from app.application.utils.time_normalizer import compose_appointment_datetime
from app.domain.entities.appointment import Appointment


class MockCalendar(CalendarPort):
    def __init__(self, timezone: ZoneInfo | None = None, duration_minutes: int = 30) -> None:
        self._timezone = timezone
        self._duration_minutes = duration_minutes
        # event_id -> (title, start, end)
        self._events: dict[str, tuple[str, datetime, datetime]] = {}
        self._next_id = 1
        self._logger = logging.getLogger(__name__)

    @property
    def events(self) -> dict[str, tuple[str, datetime, datetime]]:
        return dict(self._events)

    def add_event(self, appointment: Appointment) -> str:
        start = compose_appointment_datetime(appointment.date, appointment.time_24h or appointment.time, self._timezone)
        end = start + timedelta(minutes=self._duration_minutes)
        event_id = f"mock_event_{self._next_id}"
        self._next_id += 1
        self._events[event_id] = (appointment.calendar_title, start, end)
        self._logger.info(
            "Mock calendar event created",
            extra={"appointment_id": appointment.id, "reason": event_id},
        )
        return event_id

    def remove_event(self, appointment: Appointment) -> int:
        matched = [
            event_id
            for event_id, (title, start, _end) in self._events.items()
            if event_matches_appointment(title, start, appointment)
        ]
        for event_id in matched:
            del self._events[event_id]
        self._logger.info(
            "Mock calendar events removed",
            extra={"appointment_id": appointment.id, "reason": f"removed={len(matched)}"},
        )
        return len(matched)
