from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from app.application.dto.flow_result import FlowResult
from app.application.exceptions import InvalidDateOrTime
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.use_cases.availability import AvailabilityResolver
from app.application.use_cases.book_appointment import BookAppointmentUseCase
from app.application.use_cases.slot_request import DAY_TIME_EXAMPLE, request_slot
from app.application.use_cases.suggest_time import SuggestTimeUseCase
from app.application.utils.time_normalizer import normalize_display, today_in
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.reply import Reply
from app.domain.entities.session_state import MenuState, RepeatDateTimeState, SessionState
from app.domain.entities.slot import AvailabilitySlot


class RepeatBookingUseCase:
    """
    Rebook the customer's most recent provider + service at a new day/time.

    The stored service name and price are reused as-is (price-locked); there
    is no separate confirm step, a valid open slot books immediately.
    """

    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        resolver: AvailabilityResolver,
        book_appointment: BookAppointmentUseCase,
        timezone: ZoneInfo,
        suggest_time: SuggestTimeUseCase | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._resolver = resolver
        self._book_appointment = book_appointment
        self._timezone = timezone
        self._suggest_time = suggest_time
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def start(self, user_id: str) -> FlowResult:
        try:
            last = self._repository.fetch_most_recent(user_id)
        except Exception as e:
            self._logger.exception("Could not load last appointment", extra={"user_id": user_id, "error": str(e)})
            return FlowResult(
                replies=[Reply(text="Could not load last appointment.", meta={"error": "PersistenceError"})],
                updated_state=MenuState(),
            )

        if last is None:
            return FlowResult(
                replies=[Reply(text='No previous appointment found. Use "New" instead.', meta={"error": "NoPriorAppointment"})],
                updated_state=MenuState(),
            )
        return FlowResult(
            replies=[
                Reply(
                    text=f"Repeating last service: {last.service_name or 'Service'} with {last.provider_name or 'barber'}.\n"
                    f"Provide new day & time (e.g. {DAY_TIME_EXAMPLE})."
                )
            ],
            updated_state=RepeatDateTimeState(last_appointment=last),
        )

    def process(self, text: str, state: SessionState, user_id: str) -> FlowResult:
        if not isinstance(state, RepeatDateTimeState):
            raise ValueError(f"Repeat flow cannot handle state {type(state).__name__}")

        last = state.last_appointment
        result = request_slot(
            text,
            last.provider_id,
            self._resolver,
            today_in(self._timezone, self._clock()),
            self._suggest_time,
        )
        if result.slot is None:
            return FlowResult(replies=[result.reply], updated_state=state)

        try:
            outcome = self._book_appointment.execute(_repeat_draft(last, result.slot, user_id))
        except Exception as e:
            self._logger.exception(
                "Rebooking failed",
                extra={"user_id": user_id, "provider_id": last.provider_id, "error": str(e)},
            )
            return FlowResult(
                replies=[Reply(text="Could not rebook.", meta={"error": "PersistenceError"})],
                updated_state=MenuState(),
            )

        saved = outcome.appointment
        return FlowResult(
            replies=[
                Reply(
                    text=f"Rebooked {saved.service_name} at {saved.time} on {saved.date}.",
                    meta={"appointment_id": saved.id},
                )
            ],
            updated_state=MenuState(),
            booking=outcome,
            side_effects=outcome.side_effects,
        )


def _repeat_draft(last: Appointment, slot: AvailabilitySlot, user_id: str) -> AppointmentDraft:
    parsed = normalize_display(slot.time)
    if parsed is None:
        raise InvalidDateOrTime(f"Invalid slot time: {slot.time!r}")
    return AppointmentDraft(
        customer_id=user_id,
        customer_name=last.customer_name or "",
        provider_id=last.provider_id,
        provider_name=last.provider_name,
        provider_address=last.provider_address,
        provider_phone=last.provider_phone,
        service_name=last.service_name,
        service_price=last.service_price,
        date=slot.date,
        time=parsed.display,
        time_24h=parsed.as_24h,
    )
