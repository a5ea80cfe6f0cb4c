from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from mock_interview.core.lifecycle import initial_status, utcnow
from mock_interview.domain.models import (
    AnswerAnalysis,
    Feedback,
    Message,
    MessageRole,
    Session,
)
from mock_interview.domain.roles import InterviewRole


class StorageService:
    """Abstract storage interface for sessions, messages and feedback.

    Pure data access: no status rules live here. Replace this with a
    DB-backed implementation without changing the core or the routers.
    """

    def create_session(self, role: InterviewRole) -> Session:
        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def list_sessions(self) -> List[Session]:
        """All sessions, newest first."""
        raise NotImplementedError

    def save_session(self, session: Session) -> Session:
        """Replace the stored copy of an existing session."""
        raise NotImplementedError

    def create_message(self, session_id: str, role: MessageRole, content: str) -> Message:
        raise NotImplementedError

    def get_session_messages(self, session_id: str) -> List[Message]:
        """Messages of a session in creation order."""
        raise NotImplementedError

    def get_last_user_message(self, session_id: str) -> Optional[Message]:
        raise NotImplementedError

    def count_messages(self, session_id: str, role: Optional[MessageRole] = None) -> int:
        raise NotImplementedError

    def create_feedback(
        self,
        session_id: str,
        message_id: Optional[str],
        analysis: AnswerAnalysis,
    ) -> Feedback:
        raise NotImplementedError

    def get_session_feedback(self, session_id: str) -> List[Feedback]:
        """Per-turn feedback first, then final; creation order within each group."""
        raise NotImplementedError


class InMemoryStorage(StorageService):
    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self.sessions: Dict[str, Session] = {}
        self.messages: Dict[str, List[Message]] = {}
        self.feedback: Dict[str, List[Feedback]] = {}

    def create_session(self, role: InterviewRole) -> Session:
        session = Session(
            id=str(uuid4()),
            role=role,
            status=initial_status(),
            createdAt=self._clock(),
        )
        with self._lock:
            self.sessions[session.id] = session
            self.messages.setdefault(session.id, [])
            self.feedback.setdefault(session.id, [])
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self.sessions.get(session_id)

    def list_sessions(self) -> List[Session]:
        # dict keeps insertion (= creation) order
        with self._lock:
            return list(reversed(self.sessions.values()))

    def save_session(self, session: Session) -> Session:
        with self._lock:
            if session.id not in self.sessions:
                raise KeyError(session.id)
            self.sessions[session.id] = session
        return session

    def create_message(self, session_id: str, role: MessageRole, content: str) -> Message:
        message = Message(
            id=str(uuid4()),
            sessionId=session_id,
            role=role,
            content=content,
            createdAt=self._clock(),
        )
        with self._lock:
            self.messages.setdefault(session_id, []).append(message)
        return message

    def get_session_messages(self, session_id: str) -> List[Message]:
        with self._lock:
            return list(self.messages.get(session_id, []))

    def get_last_user_message(self, session_id: str) -> Optional[Message]:
        for message in reversed(self.get_session_messages(session_id)):
            if message.role == MessageRole.user:
                return message
        return None

    def count_messages(self, session_id: str, role: Optional[MessageRole] = None) -> int:
        messages = self.get_session_messages(session_id)
        if role is None:
            return len(messages)
        return sum(1 for m in messages if m.role == role)

    def create_feedback(
        self,
        session_id: str,
        message_id: Optional[str],
        analysis: AnswerAnalysis,
    ) -> Feedback:
        record = Feedback(
            id=str(uuid4()),
            sessionId=session_id,
            messageId=message_id,
            strengths=list(analysis.strengths),
            improvements=list(analysis.improvements),
            suggestions=list(analysis.suggestions),
            overallScore=analysis.overallScore,
            createdAt=self._clock(),
        )
        with self._lock:
            self.feedback.setdefault(session_id, []).append(record)
        return record

    def get_session_feedback(self, session_id: str) -> List[Feedback]:
        with self._lock:
            records = list(self.feedback.get(session_id, []))
        per_turn = [f for f in records if not f.is_final]
        final = [f for f in records if f.is_final]
        return per_turn + final


# Singleton provider for DI
_storage_singleton: Optional[StorageService] = None


def get_storage() -> StorageService:
    global _storage_singleton
    if _storage_singleton is None:
        _storage_singleton = InMemoryStorage()
    return _storage_singleton
