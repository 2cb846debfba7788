from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from app.application.dto.flow_result import FlowResult
from app.application.ports.directory import DirectoryPort
from app.application.use_cases.availability import AvailabilityResolver
from app.application.use_cases.book_appointment import BookAppointmentUseCase, build_draft
from app.application.use_cases.slot_request import DAY_TIME_EXAMPLE, request_slot
from app.application.use_cases.suggest_time import SuggestTimeUseCase
from app.application.utils.message_rules import (
    format_price,
    is_yes,
    list_providers,
    list_services,
    parse_number_choice,
)
from app.application.utils.time_normalizer import today_in
from app.domain.entities.reply import Reply
from app.domain.entities.session_state import (
    ChooseDateTimeState,
    ChooseProviderState,
    ChooseServiceState,
    ConfirmBookingState,
    MenuState,
    NoServicesState,
    SessionState,
)


class BookingUseCase:
    """New-booking flow: chooseProvider -> chooseService -> chooseDateTime -> confirm."""

    def __init__(
        self,
        directory: DirectoryPort,
        resolver: AvailabilityResolver,
        book_appointment: BookAppointmentUseCase,
        timezone: ZoneInfo,
        suggest_time: SuggestTimeUseCase | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._directory = directory
        self._resolver = resolver
        self._book_appointment = book_appointment
        self._timezone = timezone
        self._suggest_time = suggest_time
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def start(self, user_id: str) -> FlowResult:
        profile = self._directory.fetch_user_profile(user_id)
        locality = profile.locality_key if profile else ""
        providers = self._directory.fetch_providers_by_locality(locality)
        if not providers:
            self._logger.info("No providers for locality", extra={"user_id": user_id, "reason": locality})
            return FlowResult(
                replies=[Reply(text="I couldn’t find barbers near you yet.", meta={"error": "NoProvidersFound"})],
                updated_state=MenuState(),
            )
        return FlowResult(
            replies=[Reply(text=f"Barbers near {locality}:\n{list_providers(providers)}\n\nReply with a number.")],
            updated_state=ChooseProviderState(providers=tuple(providers)),
        )

    def process(self, text: str, state: SessionState, user_id: str) -> FlowResult:
        if isinstance(state, ChooseProviderState):
            return self._choose_provider(text, state)
        if isinstance(state, ChooseServiceState):
            return self._choose_service(text, state)
        if isinstance(state, NoServicesState):
            return FlowResult(
                replies=[Reply(text='No services for that barber. Type "menu" to restart.', meta={"error": "NoServicesFound"})],
                updated_state=state,
            )
        if isinstance(state, ChooseDateTimeState):
            return self._choose_date_time(text, state)
        if isinstance(state, ConfirmBookingState):
            return self._confirm(text, state, user_id)
        raise ValueError(f"Booking flow cannot handle state {type(state).__name__}")

    def _choose_provider(self, text: str, state: ChooseProviderState) -> FlowResult:
        index = parse_number_choice(text, len(state.providers))
        if index is None:
            return _out_of_range(len(state.providers), state)

        provider = state.providers[index]
        services = self._directory.fetch_services_for_provider(provider.id)
        if not services:
            return FlowResult(
                replies=[Reply(text='No services for that barber. Type "menu" to restart.', meta={"error": "NoServicesFound"})],
                updated_state=NoServicesState(provider=provider),
            )
        return FlowResult(
            replies=[Reply(text=f"Services:\n{list_services(services)}\n\nReply with a number.")],
            updated_state=ChooseServiceState(provider=provider, services=tuple(services)),
        )

    def _choose_service(self, text: str, state: ChooseServiceState) -> FlowResult:
        index = parse_number_choice(text, len(state.services))
        if index is None:
            return _out_of_range(len(state.services), state)

        service = state.services[index]
        return FlowResult(
            replies=[
                Reply(
                    text=f'Selected "{service.name}" — {format_price(service.price)}. '
                    f"Provide day & time (e.g. {DAY_TIME_EXAMPLE})."
                )
            ],
            updated_state=ChooseDateTimeState(provider=state.provider, service=service),
        )

    def _choose_date_time(self, text: str, state: ChooseDateTimeState) -> FlowResult:
        result = request_slot(
            text,
            state.provider.id,
            self._resolver,
            today_in(self._timezone, self._clock()),
            self._suggest_time,
        )
        if result.slot is None:
            return FlowResult(replies=[result.reply], updated_state=state)

        slot = result.slot
        return FlowResult(
            replies=[Reply(text=f"Confirm {slot.time} on {slot.date}? (yes/no)")],
            updated_state=ConfirmBookingState(provider=state.provider, service=state.service, slot=slot),
        )

    def _confirm(self, text: str, state: ConfirmBookingState, user_id: str) -> FlowResult:
        if not is_yes(text):
            # Keep provider and service; the next message is read as a new day/time.
            return FlowResult(
                replies=[Reply(text='Not confirmed. Provide another day/time or type "menu".')],
                updated_state=ChooseDateTimeState(provider=state.provider, service=state.service),
            )

        try:
            profile = self._directory.fetch_user_profile(user_id)
            draft = build_draft(user_id, profile, state.provider, state.service, state.slot)
            outcome = self._book_appointment.execute(draft)
        except Exception as e:
            self._logger.exception(
                "Booking failed",
                extra={"user_id": user_id, "provider_id": state.provider.id, "error": str(e)},
            )
            return FlowResult(
                replies=[Reply(text="Booking failed. Try again.", meta={"error": "PersistenceError"})],
                updated_state=MenuState(),
            )

        saved = outcome.appointment
        return FlowResult(
            replies=[
                Reply(
                    text=f'Booked with {saved.provider_name} for "{saved.service_name}" at {saved.time} on {saved.date}.',
                    meta={"appointment_id": saved.id},
                )
            ],
            updated_state=MenuState(),
            booking=outcome,
            side_effects=outcome.side_effects,
        )


def _out_of_range(count: int, state: SessionState) -> FlowResult:
    return FlowResult(
        replies=[Reply(text=f"Choose a valid number 1–{count}.", meta={"error": "OutOfRangeSelection"})],
        updated_state=state,
    )
