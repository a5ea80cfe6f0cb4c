from datetime import datetime, timedelta, timezone

import pytest

from mock_interview.domain.models import AnswerAnalysis, MessageRole, SessionStatus
from mock_interview.domain.roles import InterviewRole
from mock_interview.services.storage import InMemoryStorage


class TickingClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def storage():
    return InMemoryStorage(clock=TickingClock())


def test_new_session_is_active(storage):
    session = storage.create_session(InterviewRole.sales)
    assert session.status == SessionStatus.active
    assert session.completedAt is None
    assert storage.get_session(session.id) == session


def test_get_unknown_session_returns_none(storage):
    assert storage.get_session("nope") is None


def test_list_sessions_newest_first(storage):
    first = storage.create_session(InterviewRole.sales)
    second = storage.create_session(InterviewRole.teaching)
    third = storage.create_session(InterviewRole.healthcare)
    assert [s.id for s in storage.list_sessions()] == [third.id, second.id, first.id]


def test_save_session_requires_existing_record(storage):
    session = storage.create_session(InterviewRole.sales)
    storage.create_session(InterviewRole.sales)
    updated = session.model_copy(update={"status": SessionStatus.completed})
    storage.save_session(updated)
    assert storage.get_session(session.id).status == SessionStatus.completed

    with pytest.raises(KeyError):
        storage.save_session(updated.model_copy(update={"id": "unknown"}))


def test_messages_in_creation_order(storage):
    session = storage.create_session(InterviewRole.sales)
    storage.create_message(session.id, MessageRole.ai, "Q1")
    storage.create_message(session.id, MessageRole.user, "A1")
    storage.create_message(session.id, MessageRole.ai, "Q2")

    messages = storage.get_session_messages(session.id)
    assert [m.content for m in messages] == ["Q1", "A1", "Q2"]
    assert messages[0].createdAt < messages[1].createdAt < messages[2].createdAt
    assert storage.count_messages(session.id) == 3
    assert storage.count_messages(session.id, MessageRole.user) == 1
    assert storage.get_last_user_message(session.id).content == "A1"


def test_returned_transcript_is_a_copy(storage):
    session = storage.create_session(InterviewRole.sales)
    storage.create_message(session.id, MessageRole.ai, "Q1")
    storage.get_session_messages(session.id).clear()
    assert storage.count_messages(session.id) == 1


def test_sessions_do_not_share_messages(storage):
    a = storage.create_session(InterviewRole.sales)
    b = storage.create_session(InterviewRole.sales)
    storage.create_message(a.id, MessageRole.ai, "only in a")
    assert storage.get_session_messages(b.id) == []
    assert storage.get_last_user_message(b.id) is None


def test_final_feedback_listed_after_per_turn(storage):
    session = storage.create_session(InterviewRole.sales)
    answer = storage.create_message(session.id, MessageRole.user, "A")

    final = storage.create_feedback(session.id, None, AnswerAnalysis(overallScore=3))
    per_turn = storage.create_feedback(
        session.id, answer.id, AnswerAnalysis(strengths=["clear"], overallScore=4)
    )

    records = storage.get_session_feedback(session.id)
    assert [r.id for r in records] == [per_turn.id, final.id]
    assert records[0].messageId == answer.id
    assert records[0].strengths == ["clear"]
    assert records[1].is_final
