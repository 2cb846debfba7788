from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from firebase_admin import firestore

from app.application.ports.notifications import NotificationPort
from app.application.utils.reminders import plan_reminders
from app.domain.entities.appointment import Appointment


class FirestoreReminderScheduler(NotificationPort):
    """
    Reminder records under users/{uid}/notifications.

    Each record carries `sendAt` and `status`; a delivery worker pushes the
    ones that are due. Cancelling only flips the status.
    """

    def __init__(
        self,
        db,
        timezone: ZoneInfo,
        offsets_minutes: list[int],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db = db
        self._timezone = timezone
        self._offsets = offsets_minutes
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def request_permissions(self, user_id: str) -> bool:
        snapshot = self._db.collection("users").document(user_id).get()
        if not snapshot.exists:
            return False
        settings = (snapshot.to_dict() or {}).get("notificationSettings") or {}
        return bool(settings.get("appointmentReminders", True))

    def schedule_reminder(self, appointment: Appointment, user_id: str) -> list[str]:
        planned = plan_reminders(appointment, self._clock(), self._offsets, self._timezone)
        notifications = self._notifications(user_id)
        for reminder in planned:
            notifications.document(reminder.reminder_id).set(
                {
                    "title": reminder.title,
                    "body": reminder.body,
                    "type": "appointment_reminder",
                    "appointmentId": appointment.id,
                    "appointmentDate": appointment.date,
                    "appointmentTime": appointment.time,
                    "serviceName": appointment.service_name,
                    "barberName": appointment.provider_name,
                    "sendAt": reminder.send_at,
                    "status": "scheduled",
                    "read": False,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                }
            )
        self._logger.info(
            "Reminders scheduled",
            extra={"appointment_id": appointment.id, "user_id": user_id, "reason": f"count={len(planned)}"},
        )
        return [reminder.reminder_id for reminder in planned]

    def cancel_reminders(self, appointment_id: str, user_id: str) -> int:
        query = self._notifications(user_id).where(
            filter=firestore.FieldFilter("appointmentId", "==", appointment_id)
        )
        cancelled = 0
        for snapshot in query.stream():
            snapshot.reference.update({"status": "cancelled", "cancelledAt": firestore.SERVER_TIMESTAMP})
            cancelled += 1
        self._logger.info(
            "Reminders cancelled",
            extra={"appointment_id": appointment_id, "user_id": user_id, "reason": f"count={cancelled}"},
        )
        return cancelled

    def _notifications(self, user_id: str):
        return self._db.collection("users").document(user_id).collection("notifications")
