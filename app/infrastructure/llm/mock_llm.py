from __future__ import annotations

from app.application.exceptions import LLMContractError
from app.application.ports.llm import LLMPort
from app.application.utils.time_normalizer import extract_time_token, normalize_display
from app.domain.entities.suggestion import TimeSuggestion


class MockLLM(LLMPort):
    def suggest_time(self, user_text: str, candidate_times: list[str]) -> TimeSuggestion:
        if not candidate_times:
            raise LLMContractError("Suggest: no candidate times.")

        token = extract_time_token(user_text)
        wanted = normalize_display(token) if token else None
        if wanted is None:
            return TimeSuggestion(suggested_time=candidate_times[0], explanation="It's the earliest opening that day.")

        def distance(candidate: str) -> int:
            parsed = normalize_display(candidate)
            if parsed is None:
                return 24 * 60
            return abs(parsed.minutes_since_midnight - wanted.minutes_since_midnight)

        best = min(candidate_times, key=distance)
        return TimeSuggestion(suggested_time=best, explanation="It's the closest opening to the time you asked for.")
