from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.suggestion import TimeSuggestion


class LLMPort(ABC):
    @abstractmethod
    def suggest_time(self, user_text: str, candidate_times: list[str]) -> TimeSuggestion:
        """
        Pick the candidate that best fits what the customer asked for.

        Requirements:
        - `suggested_time` must be one of `candidate_times`
        - Raise LLMUpstreamError on provider/network failure
        - Raise LLMContractError on malformed output
        """
        raise NotImplementedError
