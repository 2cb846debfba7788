from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from app.api.schemas import (
    AssistantResponseSchema,
    ChatMessageSchema,
    MessageRequestSchema,
    ReplySchema,
    SessionSchema,
)
from app.application.use_cases.handle_assistant_message import HandleAssistantMessageUseCase
from app.domain.entities.reply import Reply
from app.wiring.dependencies import get_handle_assistant_message_use_case


router = APIRouter(prefix="/assistant")
logger = logging.getLogger(__name__)


def _response(uc: HandleAssistantMessageUseCase, user_id: str, replies: list[Reply]) -> AssistantResponseSchema:
    session = uc.get_session(user_id)
    return AssistantResponseSchema(
        messages=[ReplySchema(text=r.text, meta=dict(r.meta)) for r in replies],
        mode=session.mode.value if session.mode else None,
        step=session.step,
    )


@router.post("/{user_id}/focus", response_model=AssistantResponseSchema)
def focus(
    user_id: str,
    uc: HandleAssistantMessageUseCase = Depends(get_handle_assistant_message_use_case),
):
    return _response(uc, user_id, uc.focus(user_id))


@router.post("/{user_id}/messages", response_model=AssistantResponseSchema)
def post_message(
    user_id: str,
    req: MessageRequestSchema,
    uc: HandleAssistantMessageUseCase = Depends(get_handle_assistant_message_use_case),
):
    replies = uc.handle(user_id, req.text)
    return _response(uc, user_id, replies)


@router.post("/{user_id}/blur", status_code=204)
def blur(
    user_id: str,
    uc: HandleAssistantMessageUseCase = Depends(get_handle_assistant_message_use_case),
) -> Response:
    uc.blur(user_id)
    return Response(status_code=204)


@router.get("/{user_id}/session", response_model=SessionSchema)
def get_session(
    user_id: str,
    uc: HandleAssistantMessageUseCase = Depends(get_handle_assistant_message_use_case),
):
    session = uc.get_session(user_id)
    return SessionSchema(
        user_id=user_id,
        mode=session.mode.value if session.mode else None,
        step=session.step,
        generation=session.generation,
        messages=[ChatMessageSchema(sender=m.sender, text=m.text) for m in session.messages],
    )
