from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from app.application.exceptions import InvalidDateOrTime
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.calendar import CalendarPort
from app.application.ports.notifications import NotificationPort
from app.application.utils.time_normalizer import normalize_display
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.provider import Provider, Service, UserProfile
from app.domain.entities.slot import AvailabilitySlot


@dataclass(frozen=True)
class SideEffectOutcome:
    name: str
    ok: bool
    error: str | None = None
    skipped: bool = False


@dataclass(frozen=True)
class BookingOutcome:
    """The appointment is durable; `side_effects` says what happened afterwards."""

    appointment: Appointment
    side_effects: list[SideEffectOutcome] = field(default_factory=list)

    @property
    def all_side_effects_ok(self) -> bool:
        return all(effect.ok for effect in self.side_effects)


def build_draft(
    customer_id: str,
    profile: UserProfile | None,
    provider: Provider,
    service: Service,
    slot: AvailabilitySlot,
) -> AppointmentDraft:
    parsed = normalize_display(slot.time)
    if parsed is None:
        raise InvalidDateOrTime(f"Invalid slot time: {slot.time!r}")
    return AppointmentDraft(
        customer_id=customer_id,
        customer_name=profile.display_name if profile else "",
        provider_id=provider.id,
        provider_name=provider.name,
        provider_address=provider.address,
        provider_phone=provider.phone,
        service_name=service.name,
        service_price=service.price,
        date=slot.date,
        time=parsed.display,
        time_24h=parsed.as_24h,
    )


def run_side_effect(name: str, action: Callable[[], object], logger: logging.Logger, appointment_id: str) -> SideEffectOutcome:
    try:
        action()
        return SideEffectOutcome(name=name, ok=True)
    except Exception as e:
        logger.warning(
            "Side effect failed",
            extra={"reason": name, "appointment_id": appointment_id, "error": str(e)},
        )
        return SideEffectOutcome(name=name, ok=False, error=str(e))


class BookAppointmentUseCase:
    """Persist an appointment, then best-effort permissions, calendar and reminders."""

    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        notifications: NotificationPort,
        calendar: CalendarPort,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._calendar = calendar
        self._logger = logging.getLogger(__name__)

    def execute(self, draft: AppointmentDraft) -> BookingOutcome:
        # Raises PersistenceError; nothing below runs unless the record is durable.
        appointment = self._repository.create(draft)
        self._logger.info(
            "Appointment created",
            extra={"appointment_id": appointment.id, "provider_id": appointment.provider_id, "user_id": draft.customer_id},
        )

        effects: list[SideEffectOutcome] = []
        permitted = True

        def _permissions() -> None:
            nonlocal permitted
            permitted = self._notifications.request_permissions(draft.customer_id)

        effects.append(run_side_effect("permissions", _permissions, self._logger, appointment.id))
        effects.append(
            run_side_effect("calendar", lambda: self._calendar.add_event(appointment), self._logger, appointment.id)
        )
        if permitted:
            effects.append(
                run_side_effect(
                    "reminders",
                    lambda: self._notifications.schedule_reminder(appointment, draft.customer_id),
                    self._logger,
                    appointment.id,
                )
            )
        else:
            effects.append(SideEffectOutcome(name="reminders", ok=True, skipped=True))

        return BookingOutcome(appointment=appointment, side_effects=effects)
