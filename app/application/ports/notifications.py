from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.appointment import Appointment


class NotificationPort(ABC):
    """Best-effort reminder delivery. Callers treat every failure as non-fatal."""

    @abstractmethod
    def request_permissions(self, user_id: str) -> bool:
        """Return True if the user accepts appointment reminders."""
        raise NotImplementedError

    @abstractmethod
    def schedule_reminder(self, appointment: Appointment, user_id: str) -> list[str]:
        """Schedule reminders ahead of the appointment. Returns reminder ids."""
        raise NotImplementedError

    @abstractmethod
    def cancel_reminders(self, appointment_id: str, user_id: str) -> int:
        """Cancel every reminder for the appointment. Returns how many were cancelled."""
        raise NotImplementedError
