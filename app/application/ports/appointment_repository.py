from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.appointment import Appointment, AppointmentDraft


class AppointmentRepositoryPort(ABC):
    @abstractmethod
    def create(self, draft: AppointmentDraft) -> Appointment:
        """Persist a booked appointment. Raises PersistenceError."""
        raise NotImplementedError

    @abstractmethod
    def cancel(self, appointment_id: str, actor_user_id: str) -> None:
        """Soft-delete: status -> cancelled. Raises PersistenceError."""
        raise NotImplementedError

    @abstractmethod
    def fetch_recent(self, user_id: str, count: int) -> list[Appointment]:
        """Newest first by creation time."""
        raise NotImplementedError

    @abstractmethod
    def fetch_most_recent(self, user_id: str) -> Appointment | None:
        raise NotImplementedError
