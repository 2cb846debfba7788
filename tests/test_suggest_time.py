"""
Tests for the optional nearest-slot suggestion.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.application.use_cases.availability import AvailabilityResolver
from app.application.use_cases.slot_request import request_slot
from app.application.use_cases.suggest_time import SuggestTimeUseCase
from app.domain.entities.suggestion import TimeSuggestion
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.llm.openai_llm import OpenAILLM

from conftest import NOW, build_directory


class _FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _openai(content: str | None = None, error: Exception | None = None) -> tuple[OpenAILLM, _FakeCompletions]:
    completions = _FakeCompletions(content, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAILLM(client=client), completions


class _RaisingLLM(LLMPort):
    def suggest_time(self, user_text: str, candidate_times: list[str]) -> TimeSuggestion:
        raise LLMUpstreamError("timeout")


def test_mock_llm_picks_nearest_candidate():
    suggestion = MockLLM().suggest_time("friday 1:10 pm", ["9:00 AM", "1:00 PM", "3:00 PM"])
    assert suggestion.suggested_time == "1:00 PM"

    suggestion = MockLLM().suggest_time("friday afternoon", ["9:00 AM", "1:00 PM"])
    assert suggestion.suggested_time == "9:00 AM"


def test_openai_llm_parses_json_mode_reply():
    llm, completions = _openai('{"suggested_time": " 2:00 PM ", "explanation": "Closest to 2."}')

    suggestion = llm.suggest_time("friday 2:15pm", ["1:00 PM", "2:00 PM"])

    assert suggestion == TimeSuggestion(suggested_time="2:00 PM", explanation="Closest to 2.")
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_openai_llm_contract_errors():
    with pytest.raises(LLMContractError):
        _openai("not json")[0].suggest_time("x", ["1:00 PM"])
    with pytest.raises(LLMContractError):
        _openai('{"explanation": "no time"}')[0].suggest_time("x", ["1:00 PM"])
    with pytest.raises(LLMContractError):
        _openai("")[0].suggest_time("x", ["1:00 PM"])
    with pytest.raises(LLMContractError):
        _openai('{"suggested_time": "6:00 PM", "explanation": "late"}')[0].suggest_time("x", ["1:00 PM"])
    with pytest.raises(LLMUpstreamError):
        _openai(error=ConnectionError("reset"))[0].suggest_time("x", ["1:00 PM"])


def test_use_case_only_returns_real_candidates():
    llm, _ = _openai('{"suggested_time": "14:00", "explanation": "ok"}')
    suggestion = SuggestTimeUseCase(llm).execute("2pm", ["1:00 PM", "2:00 PM"])
    # normalized back to the candidate's own form
    assert suggestion.suggested_time == "2:00 PM"

    llm, _ = _openai('{"suggested_time": "6:00 PM", "explanation": "ok"}')
    assert SuggestTimeUseCase(llm).execute("6pm", ["1:00 PM", "2:00 PM"]) is None


def test_use_case_swallows_llm_failures_and_respects_flag():
    assert SuggestTimeUseCase(_RaisingLLM()).execute("2pm", ["1:00 PM"]) is None
    assert SuggestTimeUseCase(MockLLM(), enabled=False).execute("2pm", ["1:00 PM"]) is None
    assert SuggestTimeUseCase(MockLLM()).execute("2pm", []) is None


def test_unavailable_reply_carries_suggestion():
    resolver = AvailabilityResolver(build_directory())
    result = request_slot("Friday 8:00 PM", "barber_marco", resolver, NOW.date(), SuggestTimeUseCase(MockLLM()))

    assert result.slot is None
    assert result.reply.error == "SlotUnavailable"
    assert result.reply.meta["suggested_time"] == "4:30 PM"
    assert "\nSuggestion: 4:30 PM." in result.reply.text
