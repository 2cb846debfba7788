from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Reply:
    text: str
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> str | None:
        return self.meta.get("error")
