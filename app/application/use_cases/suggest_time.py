from __future__ import annotations

import logging

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.application.utils.time_normalizer import equal_times
from app.domain.entities.suggestion import TimeSuggestion


class SuggestTimeUseCase:
    """Optional enrichment: ask the model which open slot best fits the request."""

    def __init__(self, llm: LLMPort | None, enabled: bool = True) -> None:
        self._llm = llm
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, user_text: str, candidate_times: list[str]) -> TimeSuggestion | None:
        if not self._enabled or self._llm is None or not candidate_times:
            return None
        try:
            suggestion = self._llm.suggest_time(user_text, candidate_times)
        except (LLMUpstreamError, LLMContractError) as e:
            self._logger.warning("Time suggestion unavailable", extra={"error": str(e)})
            return None

        for candidate in candidate_times:
            if equal_times(candidate, suggestion.suggested_time):
                return TimeSuggestion(suggested_time=candidate, explanation=suggestion.explanation)

        self._logger.warning(
            "Suggested time not among candidates",
            extra={"reason": suggestion.suggested_time},
        )
        return None
