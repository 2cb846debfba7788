from dataclasses import dataclass


@dataclass(frozen=True)
class TimeSuggestion:
    suggested_time: str
    explanation: str
