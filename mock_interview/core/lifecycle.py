"""
Session lifecycle.

A session is created `active` and moves to `completed` exactly once.
`completed` is terminal: no further messages, no second end.

Also holds the per-session lock registry that serialises every
read-transcript -> call-service -> persist sequence on one session.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, List

from mock_interview.core.errors import InvalidSessionStateError
from mock_interview.domain.models import Session, SessionStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def allowed_transitions() -> Dict[SessionStatus, List[SessionStatus]]:
    """Return the allowed transitions graph for session statuses."""
    return {
        SessionStatus.active: [SessionStatus.completed],
        SessionStatus.completed: [],
    }


def validate_transition(current: str, target: str) -> bool:
    """Validate if transition is allowed (string-safe)."""
    try:
        current_status = SessionStatus(current)
        target_status = SessionStatus(target)
    except ValueError:
        return False
    return target_status in allowed_transitions()[current_status]


def initial_status() -> SessionStatus:
    return SessionStatus.active


def is_terminal(status: SessionStatus) -> bool:
    return not allowed_transitions()[status]


def ensure_active(session: Session) -> None:
    """Raise InvalidSessionStateError unless the session accepts messages."""
    if is_terminal(session.status):
        raise InvalidSessionStateError("Session is not active", session_id=session.id)


def complete(session: Session, now: datetime) -> Session:
    """
    Return a completed copy of the session, stamped with `now`.

    Raises:
        InvalidSessionStateError: If the session is already completed
    """
    if not validate_transition(session.status.value, SessionStatus.completed.value):
        raise InvalidSessionStateError("Session has already ended", session_id=session.id)
    return session.model_copy(update={
        "status": SessionStatus.completed,
        "completedAt": now,
    })


class SessionLocks:
    """
    asyncio.Lock per session id. Different sessions never block each other.

    A lock is dropped once no coroutine holds or waits for it, so the
    registry only grows with the sessions currently in use.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def get(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        lock = self.get(session_id)
        self._users[session_id] = self._users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[session_id] -= 1
            if not self._users[session_id]:
                del self._users[session_id]
                del self._locks[session_id]

    def __len__(self) -> int:
        return len(self._locks)
