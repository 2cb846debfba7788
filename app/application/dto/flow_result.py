from __future__ import annotations

from dataclasses import dataclass, field

from app.application.use_cases.book_appointment import BookingOutcome, SideEffectOutcome
from app.domain.entities.reply import Reply
from app.domain.entities.session_state import SessionState


@dataclass(frozen=True)
class FlowResult:
    replies: list[Reply]
    updated_state: SessionState
    booking: BookingOutcome | None = None
    side_effects: list[SideEffectOutcome] = field(default_factory=list)

    @property
    def error(self) -> str | None:
        for reply in self.replies:
            if reply.error:
                return reply.error
        return None
