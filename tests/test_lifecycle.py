import asyncio
from datetime import datetime, timezone

import pytest

from mock_interview.core.errors import InvalidSessionStateError
from mock_interview.core.lifecycle import (
    SessionLocks,
    complete,
    ensure_active,
    initial_status,
    is_terminal,
    validate_transition,
)
from mock_interview.domain.models import Session, SessionStatus
from mock_interview.domain.roles import InterviewRole

from .conftest import run

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_session(status=SessionStatus.active):
    return Session(id="s1", role=InterviewRole.sales, status=status, createdAt=NOW)


def test_transitions():
    assert initial_status() == SessionStatus.active
    assert validate_transition("active", "completed")
    assert not validate_transition("completed", "active")
    assert not validate_transition("completed", "completed")
    assert not validate_transition("active", "paused")
    assert is_terminal(SessionStatus.completed)
    assert not is_terminal(SessionStatus.active)


def test_complete_stamps_time_on_a_copy():
    session = make_session()
    done = complete(session, NOW)

    assert done.status == SessionStatus.completed
    assert done.completedAt == NOW
    assert session.status == SessionStatus.active
    assert session.completedAt is None


def test_complete_twice_is_rejected():
    done = complete(make_session(), NOW)
    with pytest.raises(InvalidSessionStateError) as exc_info:
        complete(done, NOW)
    assert exc_info.value.status_code == 400


def test_ensure_active():
    ensure_active(make_session())
    with pytest.raises(InvalidSessionStateError, match="not active"):
        ensure_active(make_session(SessionStatus.completed))


def test_locks_are_per_session():
    locks = SessionLocks()
    assert locks.get("a") is locks.get("a")
    assert locks.get("a") is not locks.get("b")


def test_lock_is_dropped_once_released():
    locks = SessionLocks()

    async def scenario():
        async with locks.hold("a"):
            held = len(locks)
        return held, len(locks)

    assert run(scenario()) == (1, 0)


def test_waiters_keep_the_lock_until_done():
    locks = SessionLocks()
    order = []

    async def worker(n):
        async with locks.hold("a"):
            order.append(n)
            await asyncio.sleep(0)
            order.append(n)

    async def scenario():
        await asyncio.gather(worker(1), worker(2))

    run(scenario())
    assert order == [1, 1, 2, 2]
    assert len(locks) == 0
