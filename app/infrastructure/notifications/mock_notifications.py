from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from app.application.ports.notifications import NotificationPort
from app.application.utils.reminders import PlannedReminder, plan_reminders
from app.domain.entities.appointment import Appointment


class MockNotifications(NotificationPort):
    def __init__(
        self,
        timezone: ZoneInfo,
        offsets_minutes: list[int] | None = None,
        clock: Callable[[], datetime] | None = None,
        permitted: bool = True,
    ) -> None:
        self._timezone = timezone
        self._offsets = offsets_minutes or [24 * 60, 60]
        self._clock = clock or (lambda: datetime.now(timezone))
        self._permitted = permitted
        # reminder_id -> (user_id, reminder, status)
        self.reminders: dict[str, tuple[str, PlannedReminder, str]] = {}
        self._logger = logging.getLogger(__name__)

    def request_permissions(self, user_id: str) -> bool:
        return self._permitted

    def schedule_reminder(self, appointment: Appointment, user_id: str) -> list[str]:
        planned = plan_reminders(appointment, self._clock(), self._offsets, self._timezone)
        for reminder in planned:
            self.reminders[reminder.reminder_id] = (user_id, reminder, "scheduled")
        self._logger.info(
            "Mock reminders scheduled",
            extra={"appointment_id": appointment.id, "user_id": user_id, "reason": f"count={len(planned)}"},
        )
        return [reminder.reminder_id for reminder in planned]

    def cancel_reminders(self, appointment_id: str, user_id: str) -> int:
        cancelled = 0
        for reminder_id, (owner, reminder, status) in list(self.reminders.items()):
            if reminder.appointment_id == appointment_id and status == "scheduled":
                self.reminders[reminder_id] = (owner, reminder, "cancelled")
                cancelled += 1
        return cancelled
