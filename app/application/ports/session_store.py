from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from app.domain.entities.session_state import ConversationSession


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, user_id: str) -> ConversationSession:
        """Current session, or a fresh menu session if none exists."""
        raise NotImplementedError

    @abstractmethod
    def put(self, session: ConversationSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def lock(self, user_id: str) -> AbstractContextManager:
        """Per-user lock guarding read-compare-write of a session."""
        raise NotImplementedError
