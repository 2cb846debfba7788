from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from app.application.utils.time_normalizer import compose_appointment_datetime
from app.domain.entities.appointment import Appointment


@dataclass(frozen=True)
class PlannedReminder:
    reminder_id: str
    appointment_id: str
    send_at: datetime
    title: str
    body: str


def plan_reminders(
    appointment: Appointment,
    now: datetime,
    offsets_minutes: list[int],
    timezone: ZoneInfo | None = None,
) -> list[PlannedReminder]:
    """One reminder per offset before the appointment; offsets already in the past are skipped."""
    start = compose_appointment_datetime(appointment.date, appointment.time_24h or appointment.time, timezone)
    planned: list[PlannedReminder] = []
    for offset in offsets_minutes:
        send_at = start - timedelta(minutes=offset)
        if send_at <= now:
            continue
        if offset >= 24 * 60:
            title = "Appointment Reminder"
            body = (
                f"You have a {appointment.service_name} appointment with {appointment.provider_name} "
                f"on {appointment.date} at {appointment.time}."
            )
        else:
            title = "Upcoming Appointment"
            body = (
                f"Your {appointment.service_name} appointment with {appointment.provider_name} "
                f"is on {appointment.date} at {appointment.time}."
            )
        planned.append(
            PlannedReminder(
                reminder_id=f"reminder_{_offset_label(offset)}_{appointment.id}",
                appointment_id=appointment.id,
                send_at=send_at,
                title=title,
                body=body,
            )
        )
    return planned


def _offset_label(offset_minutes: int) -> str:
    if offset_minutes % 60 == 0:
        return f"{offset_minutes // 60}h"
    return f"{offset_minutes}m"
