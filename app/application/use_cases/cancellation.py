from __future__ import annotations

import logging

from app.application.dto.flow_result import FlowResult
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.calendar import CalendarPort
from app.application.ports.notifications import NotificationPort
from app.application.use_cases.book_appointment import run_side_effect
from app.application.utils.message_rules import is_no, is_yes, list_appointments, parse_number_choice
from app.domain.entities.reply import Reply
from app.domain.entities.session_state import CancelConfirmState, CancelListState, MenuState, SessionState


class CancellationUseCase:
    """Cancel flow: list recent appointments -> confirm -> cancel + clean up reminders/calendar."""

    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        notifications: NotificationPort,
        calendar: CalendarPort,
        recent_limit: int = 3,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._calendar = calendar
        self._recent_limit = recent_limit
        self._logger = logging.getLogger(__name__)

    def start(self, user_id: str) -> FlowResult:
        try:
            recents = self._repository.fetch_recent(user_id, self._recent_limit)
        except Exception as e:
            self._logger.exception("Could not load appointments", extra={"user_id": user_id, "error": str(e)})
            return FlowResult(
                replies=[Reply(text="Could not load appointments. Try again later.", meta={"error": "PersistenceError"})],
                updated_state=MenuState(),
            )

        if not recents:
            return FlowResult(
                replies=[Reply(text="No appointments found to cancel.", meta={"error": "NoAppointmentsToCancel"})],
                updated_state=MenuState(),
            )
        return FlowResult(
            replies=[
                Reply(
                    text=f"Most recent appointments:\n{list_appointments(recents)}\n\n"
                    f"Reply with a number (1-{len(recents)}) to cancel."
                )
            ],
            updated_state=CancelListState(appointments=tuple(recents)),
        )

    def process(self, text: str, state: SessionState, user_id: str) -> FlowResult:
        if isinstance(state, CancelListState):
            return self._choose(text, state)
        if isinstance(state, CancelConfirmState):
            return self._confirm(text, state, user_id)
        raise ValueError(f"Cancel flow cannot handle state {type(state).__name__}")

    def _choose(self, text: str, state: CancelListState) -> FlowResult:
        index = parse_number_choice(text, len(state.appointments))
        if index is None:
            return FlowResult(
                replies=[
                    Reply(
                        text=f'Enter a number 1-{len(state.appointments)}, or type "menu".',
                        meta={"error": "OutOfRangeSelection"},
                    )
                ],
                updated_state=state,
            )
        chosen = state.appointments[index]
        return FlowResult(
            replies=[Reply(text=f"Cancel {chosen.date} at {chosen.time}? (yes/no)")],
            updated_state=CancelConfirmState(appointment=chosen),
        )

    def _confirm(self, text: str, state: CancelConfirmState, user_id: str) -> FlowResult:
        if is_no(text):
            return FlowResult(replies=[Reply(text="Not cancelled.")], updated_state=MenuState())
        if not is_yes(text):
            return FlowResult(replies=[Reply(text='Reply "yes" or "no".')], updated_state=state)

        appointment = state.appointment
        try:
            self._repository.cancel(appointment.id, user_id)
        except Exception as e:
            self._logger.exception(
                "Cancel failed",
                extra={"user_id": user_id, "appointment_id": appointment.id, "error": str(e)},
            )
            return FlowResult(
                replies=[Reply(text="Could not cancel. Try again later.", meta={"error": "PersistenceError"})],
                updated_state=MenuState(),
            )

        self._logger.info("Appointment cancelled", extra={"user_id": user_id, "appointment_id": appointment.id})
        # Reminders first, then calendar; neither can undo the cancellation.
        effects = [
            run_side_effect(
                "reminders",
                lambda: self._notifications.cancel_reminders(appointment.id, user_id),
                self._logger,
                appointment.id,
            ),
            run_side_effect("calendar", lambda: self._calendar.remove_event(appointment), self._logger, appointment.id),
        ]
        return FlowResult(
            replies=[
                Reply(
                    text=f"Cancelled {appointment.date} at {appointment.time}.",
                    meta={"appointment_id": appointment.id},
                )
            ],
            updated_state=MenuState(),
            side_effects=effects,
        )
