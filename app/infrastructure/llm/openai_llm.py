from __future__ import annotations

import json
from typing import Any

from openai import OpenAI

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.application.utils.time_normalizer import equal_times
from app.core.config import settings
from app.domain.entities.suggestion import TimeSuggestion
from app.infrastructure.llm.prompts import build_suggest_prompt


class OpenAILLM(LLMPort):
    """
    OpenAI-backed adapter implementing LLMPort.

    Contract guarantees:
    - suggest_time returns a TimeSuggestion with both fields as strings
    - Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: invalid JSON or wrong schema/shape
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def suggest_time(self, user_text: str, candidate_times: list[str]) -> TimeSuggestion:
        if not candidate_times:
            raise LLMContractError("Suggest: no candidate times.")

        text = self._call_text(
            model=settings.OPENAI_MODEL_SUGGEST,
            prompt=build_suggest_prompt(user_text, candidate_times),
            temperature=settings.OPENAI_TEMPERATURE_SUGGEST,
            use_json_mode=True,
        )

        data = _parse_json(text, what="suggest")
        if not isinstance(data, dict):
            raise LLMContractError("Suggest: expected a JSON object with 'suggested_time' key.")

        suggested = data.get("suggested_time")
        if not isinstance(suggested, str) or not suggested.strip():
            raise LLMContractError("Suggest: 'suggested_time' must be a non-empty string.")

        explanation = data.get("explanation", "")
        if not isinstance(explanation, str):
            raise LLMContractError("Suggest: 'explanation' must be a string.")

        if not any(equal_times(suggested, candidate) for candidate in candidate_times):
            raise LLMContractError(f"Suggest: {suggested!r} is not one of the candidate times.")

        return TimeSuggestion(suggested_time=suggested.strip(), explanation=explanation.strip())

    def _call_text(self, model: str, prompt: str, temperature: float, use_json_mode: bool = False) -> str:
        try:
            kwargs = {
                "model": model,
                "messages": [
                    {"role": "system", "content": "Return only valid JSON. Do not include markdown or extra text."},
                    {"role": "user", "content": prompt},
                ],
                "temperature": temperature,
                "max_tokens": 200,
            }
            if use_json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            resp = self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content


def _parse_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except Exception:
        snippet = text[:200].replace("\n", " ")
        raise LLMContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")
