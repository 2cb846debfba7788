from __future__ import annotations

import logging
import threading
from dataclasses import replace

from app.application.dto.flow_result import FlowResult
from app.application.ports.session_store import SessionStorePort
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.repeat_booking import RepeatBookingUseCase
from app.application.utils.message_rules import (
    MENU_REMINDER,
    MENU_TEXT,
    is_menu_command,
    pick_menu_option,
)
from app.domain.entities.reply import Reply
from app.domain.entities.session_state import (
    ChatMessage,
    ConversationSession,
    MenuState,
    Mode,
    PayState,
)

PAY_PROMPT = "Let’s complete your payment. Do you want to pay with card or wallet?"
PAY_REDIRECT = "Payments are completed on the Payment screen. Returning to the menu."


class HandleAssistantMessageUseCase:
    """
    Routes chat input for one customer's assistant screen.

    While no mode is active only menu picks are accepted; once a mode is set
    every message goes to that flow until it returns to the menu. Typing
    "menu" resets from any step.

    Each reset bumps the session generation. A flow step captures the
    generation before it calls out to collaborators, and its result is
    dropped if the session was reset in the meantime. Only one step runs per
    user at a time; other input arriving meanwhile is dropped, except "menu".
    """

    def __init__(
        self,
        sessions: SessionStorePort,
        booking: BookingUseCase,
        cancellation: CancellationUseCase,
        repeat_booking: RepeatBookingUseCase,
    ) -> None:
        self._sessions = sessions
        self._booking = booking
        self._cancellation = cancellation
        self._repeat_booking = repeat_booking
        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def focus(self, user_id: str) -> list[Reply]:
        """Screen gained focus: full reset, then the menu as first message."""
        menu = Reply(text=MENU_TEXT)
        self._reset(user_id, [menu])
        return [menu]

    def blur(self, user_id: str) -> None:
        self._reset(user_id, [])

    def get_session(self, user_id: str) -> ConversationSession:
        return self._sessions.get(user_id)

    def handle(self, user_id: str, text: str) -> list[Reply]:
        text = (text or "").strip()
        if not text:
            return []

        if is_menu_command(text):
            menu = Reply(text=MENU_TEXT)
            self._reset(user_id, [menu], user_text=text)
            return [menu]

        if not self._begin(user_id):
            self._logger.info("Input dropped while a step is running", extra={"user_id": user_id})
            return []
        try:
            return self._step(user_id, text)
        finally:
            self._end(user_id)

    def _step(self, user_id: str, text: str) -> list[Reply]:
        session = self._sessions.get(user_id)
        generation = session.generation
        self._logger.info(
            "Assistant input",
            extra={"user_id": user_id, "mode": _mode_name(session), "step": session.step, "generation": generation},
        )

        try:
            result = self._route(user_id, text, session)
        except Exception as e:
            self._logger.exception(
                "Unexpected error in assistant flow",
                extra={"user_id": user_id, "mode": _mode_name(session), "step": session.step, "error": str(e)},
            )
            result = FlowResult(
                replies=[Reply(text="Unexpected error. Returning to the menu.", meta={"error": "UnexpectedError"})],
                updated_state=MenuState(),
            )

        if not self._commit(user_id, session, text, result):
            return []
        return list(result.replies)

    def _begin(self, user_id: str) -> bool:
        with self._in_flight_lock:
            if user_id in self._in_flight:
                return False
            self._in_flight.add(user_id)
            return True

    def _end(self, user_id: str) -> None:
        with self._in_flight_lock:
            self._in_flight.discard(user_id)

    def _route(self, user_id: str, text: str, session: ConversationSession) -> FlowResult:
        state = session.state
        if session.mode is None:
            picked = pick_menu_option(text)
            if picked is None:
                return FlowResult(replies=[Reply(text=MENU_REMINDER)], updated_state=state)
            return self._start(picked, user_id)

        if session.mode == Mode.new:
            return self._booking.process(text, state, user_id)
        if session.mode == Mode.cancel:
            return self._cancellation.process(text, state, user_id)
        if session.mode == Mode.repeat:
            return self._repeat_booking.process(text, state, user_id)
        return FlowResult(replies=[Reply(text=PAY_REDIRECT)], updated_state=MenuState())

    def _start(self, mode: Mode, user_id: str) -> FlowResult:
        if mode == Mode.new:
            return self._booking.start(user_id)
        if mode == Mode.cancel:
            return self._cancellation.start(user_id)
        if mode == Mode.repeat:
            return self._repeat_booking.start(user_id)
        return FlowResult(replies=[Reply(text=PAY_PROMPT)], updated_state=PayState())

    def _commit(self, user_id: str, loaded: ConversationSession, user_text: str, result: FlowResult) -> bool:
        with self._sessions.lock(user_id):
            current = self._sessions.get(user_id)
            if current.generation != loaded.generation or current.state is not loaded.state:
                self._logger.info(
                    "Stale result discarded",
                    extra={"user_id": user_id, "generation": loaded.generation, "reason": f"current={current.generation}"},
                )
                return False
            messages = current.messages + (ChatMessage(sender="user", text=user_text),)
            messages += tuple(ChatMessage(sender="bot", text=reply.text) for reply in result.replies)
            self._sessions.put(replace(current, state=result.updated_state, messages=messages))
        if result.updated_state.mode != current.mode or result.updated_state.step != current.step:
            self._logger.info(
                "Assistant transition",
                extra={
                    "user_id": user_id,
                    "mode": result.updated_state.mode.value if result.updated_state.mode else None,
                    "step": result.updated_state.step,
                },
            )
        return True

    def _reset(self, user_id: str, replies: list[Reply], user_text: str | None = None) -> None:
        with self._sessions.lock(user_id):
            current = self._sessions.get(user_id)
            messages = (ChatMessage(sender="user", text=user_text),) if user_text else ()
            messages += tuple(ChatMessage(sender="bot", text=reply.text) for reply in replies)
            self._sessions.put(
                ConversationSession(
                    user_id=user_id,
                    generation=current.generation + 1,
                    state=MenuState(),
                    messages=messages,
                )
            )
        self._logger.info("Assistant reset", extra={"user_id": user_id, "generation": current.generation + 1})


def _mode_name(session: ConversationSession) -> str | None:
    return session.mode.value if session.mode else None
