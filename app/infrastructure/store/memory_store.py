from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from app.application.exceptions import PersistenceError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.directory import DirectoryPort
from app.application.ports.session_store import SessionStorePort
from app.domain.entities.appointment import Appointment, AppointmentDraft, AppointmentStatus
from app.domain.entities.provider import Provider, Service, UserProfile
from app.domain.entities.session_state import ConversationSession
from app.domain.entities.slot import AvailabilitySlot


class MemoryDirectoryStore(DirectoryPort):
    def __init__(
        self,
        profiles: list[UserProfile] | None = None,
        providers: dict[str, list[Provider]] | None = None,
        services: dict[str, list[Service]] | None = None,
        stored_availability: dict[str, list[AvailabilitySlot]] | None = None,
        default_locality: str | None = None,
    ) -> None:
        self._profiles: dict[str, UserProfile] = {p.id: p for p in (profiles or [])}
        # locality key -> providers
        self._providers: dict[str, list[Provider]] = {k: list(v) for k, v in (providers or {}).items()}
        self._services: dict[str, list[Service]] = {k: list(v) for k, v in (services or {}).items()}
        self._availability: dict[str, list[AvailabilitySlot]] = {
            k: list(v) for k, v in (stored_availability or {}).items()
        }
        # unknown users are treated as living here when set
        self._default_locality = default_locality

    def add_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.id] = profile

    def add_provider(self, locality_key: str, provider: Provider, services: list[Service] | None = None) -> None:
        self._providers.setdefault(locality_key, []).append(provider)
        if services is not None:
            self._services[provider.id] = list(services)

    def set_services(self, provider_id: str, services: list[Service]) -> None:
        self._services[provider_id] = list(services)

    def set_stored_availability(self, provider_id: str, slots: list[AvailabilitySlot]) -> None:
        self._availability[provider_id] = list(slots)

    def fetch_user_profile(self, user_id: str) -> UserProfile | None:
        profile = self._profiles.get(user_id)
        if profile is None and self._default_locality is not None:
            return UserProfile(id=user_id, locality_key=self._default_locality)
        return profile

    def fetch_providers_by_locality(self, locality_key: str) -> list[Provider]:
        return list(self._providers.get(locality_key, []))

    def fetch_provider(self, provider_id: str) -> Provider | None:
        for providers in self._providers.values():
            for provider in providers:
                if provider.id == provider_id:
                    return provider
        return None

    def fetch_services_for_provider(self, provider_id: str) -> list[Service]:
        return list(self._services.get(provider_id, []))

    def fetch_provider_availability(self, provider_id: str) -> list[AvailabilitySlot]:
        return list(self._availability.get(provider_id, []))


class MemoryAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._ids = itertools.count(1)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def create(self, draft: AppointmentDraft) -> Appointment:
        with self._lock:
            appointment_id = f"appt_{next(self._ids)}"
            appointment = Appointment.from_draft(appointment_id, draft, created_at=self._clock())
            self._appointments[appointment_id] = appointment
            return appointment

    def cancel(self, appointment_id: str, actor_user_id: str) -> None:
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            if appointment is None:
                raise PersistenceError(f"Appointment {appointment_id} not found")
            self._appointments[appointment_id] = replace(
                appointment, status=AppointmentStatus.cancelled, cancelled_by=actor_user_id
            )

    def fetch_recent(self, user_id: str, count: int) -> list[Appointment]:
        return self._for_user(user_id)[:count]

    def fetch_most_recent(self, user_id: str) -> Appointment | None:
        recent = self._for_user(user_id)
        return recent[0] if recent else None

    def get(self, appointment_id: str) -> Appointment | None:
        return self._appointments.get(appointment_id)

    def all(self) -> list[Appointment]:
        return list(self._appointments.values())

    def _for_user(self, user_id: str) -> list[Appointment]:
        with self._lock:
            mine = [a for a in self._appointments.values() if a.customer_id == user_id]
        # Insertion order is creation order.
        return list(reversed(mine))


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._sessions: dict[str, ConversationSession] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def get(self, user_id: str) -> ConversationSession:
        return self._sessions.get(user_id) or ConversationSession(user_id=user_id)

    def put(self, session: ConversationSession) -> None:
        self._sessions[session.user_id] = session

    def lock(self, user_id: str) -> threading.RLock:
        """Get or create a lock for a user_id."""
        with self._lock_lock:
            if user_id not in self._locks:
                self._locks[user_id] = threading.RLock()
            return self._locks[user_id]
