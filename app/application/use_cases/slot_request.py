from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.application.use_cases.availability import AvailabilityResolver, is_slot_available, same_day_times
from app.application.use_cases.suggest_time import SuggestTimeUseCase
from app.application.utils.time_normalizer import parse_day_and_time, resolve_day_offset
from app.domain.entities.reply import Reply
from app.domain.entities.slot import AvailabilitySlot

DAY_TIME_EXAMPLE = "Friday 9:00 AM"


@dataclass(frozen=True)
class SlotRequest:
    slot: AvailabilitySlot | None
    reply: Reply | None


def request_slot(
    text: str,
    provider_id: str,
    resolver: AvailabilityResolver,
    reference_date: date,
    suggest_time: SuggestTimeUseCase | None = None,
) -> SlotRequest:
    """Turn "Friday 9:00 AM" into one of the provider's open slots, or a re-prompt."""
    parsed = parse_day_and_time(text, reference_date)
    if parsed is None:
        error = "InvalidTimeFormat" if resolve_day_offset(text, reference_date) is not None else "UnparseableDateTime"
        return SlotRequest(
            slot=None,
            reply=Reply(
                text=f'Please say a weekday + time like "{DAY_TIME_EXAMPLE}".',
                meta={"error": error},
            ),
        )

    requested_date, requested_time = parsed
    slots = resolver.slots_for(provider_id, reference_date)
    slot = is_slot_available(slots, requested_date, requested_time)
    if slot is not None:
        return SlotRequest(slot=slot, reply=None)

    same_day = same_day_times(slots, requested_date)
    message = f"Not available. Available on {requested_date.iso}: {', '.join(same_day) or 'None'}"
    meta: dict[str, object] = {"error": "SlotUnavailable", "available": same_day}
    if suggest_time is not None:
        suggestion = suggest_time.execute(text, same_day)
        if suggestion is not None:
            message += f"\nSuggestion: {suggestion.suggested_time}. {suggestion.explanation}".rstrip()
            meta["suggested_time"] = suggestion.suggested_time
    return SlotRequest(slot=None, reply=Reply(text=message, meta=meta))
