from typing import Any

from pydantic import BaseModel, Field


class MessageRequestSchema(BaseModel):
    text: str = ""


class ReplySchema(BaseModel):
    text: str
    meta: dict[str, Any] = Field(default_factory=dict)


class AssistantResponseSchema(BaseModel):
    messages: list[ReplySchema]
    mode: str | None = None
    step: str


class ChatMessageSchema(BaseModel):
    sender: str
    text: str


class SessionSchema(BaseModel):
    user_id: str
    mode: str | None = None
    step: str
    generation: int
    messages: list[ChatMessageSchema]
