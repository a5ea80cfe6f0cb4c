import asyncio

import pytest

from mock_interview.core.errors import (
    InvalidSessionStateError,
    ProcessingError,
    ServiceError,
    SessionNotFoundError,
)
from mock_interview.core.orchestrator import feedback_due
from mock_interview.domain.models import MessageRole, SessionStatus

from .conftest import run


@pytest.mark.parametrize(
    "answer_number, expected",
    [(1, False), (2, True), (3, False), (4, True), (5, False), (6, True)],
)
def test_feedback_due_on_every_second_answer(answer_number, expected):
    assert feedback_due(answer_number - 1) is expected


def test_turn_stores_user_then_ai_message(manager, store):
    session = run(manager.create_session("sales"))
    result = run(manager.send_message(session.id, "I have five years in B2B sales."))

    messages = store.get_session_messages(session.id)
    assert [m.role for m in messages] == [MessageRole.ai, MessageRole.user, MessageRole.ai]
    assert messages[1] == result.userMessage
    assert messages[2] == result.aiMessage
    assert result.userMessage.content == "I have five years in B2B sales."
    assert result.feedback is None


def test_second_answer_gets_feedback_linked_to_it(manager, store, fake_client):
    fake_client.replies = ["Why sales?", "Tell me about a deal."]
    session = run(manager.create_session("sales"))

    run(manager.send_message(session.id, "First answer"))
    second = run(manager.send_message(session.id, "Because I like people"))

    feedback = store.get_session_feedback(session.id)
    assert len(feedback) == 1
    assert feedback[0].messageId == second.userMessage.id
    assert second.feedback == feedback[0]
    assert fake_client.analyze_calls == [("Because I like people", "Why sales?", session.role)]


def test_feedback_after_answers_two_four_and_six(manager, store):
    session = run(manager.create_session("teaching"))
    results = [run(manager.send_message(session.id, f"Answer {n}")) for n in range(1, 7)]

    linked = [f.messageId for f in store.get_session_feedback(session.id)]
    assert linked == [results[1].userMessage.id, results[3].userMessage.id, results[5].userMessage.id]


def test_interviewer_sees_full_transcript_as_chat_history(manager, fake_client):
    fake_client.opening = "Opening question?"
    session = run(manager.create_session("healthcare"))
    run(manager.send_message(session.id, "My answer"))

    role, history = fake_client.respond_calls[0]
    assert role == session.role
    assert [(t.role, t.content) for t in history] == [
        ("assistant", "Opening question?"),
        ("user", "My answer"),
    ]


def test_unknown_session_is_rejected(manager):
    with pytest.raises(SessionNotFoundError):
        run(manager.send_message("missing", "hello"))


def test_completed_session_rejects_messages_without_writing(manager, store):
    session = run(manager.create_session("sales"))
    run(manager.send_message(session.id, "Answer"))
    run(manager.end_session(session.id))

    messages_before = store.count_messages(session.id)
    feedback_before = len(store.get_session_feedback(session.id))

    with pytest.raises(InvalidSessionStateError):
        run(manager.send_message(session.id, "Too late"))

    assert store.count_messages(session.id) == messages_before
    assert len(store.get_session_feedback(session.id)) == feedback_before
    assert store.get_session(session.id).status == SessionStatus.completed


def test_reply_failure_keeps_user_message(manager, store, fake_client):
    session = run(manager.create_session("sales"))
    fake_client.respond_error = ServiceError("model exploded")

    with pytest.raises(ProcessingError) as exc_info:
        run(manager.send_message(session.id, "My answer"))

    assert "model exploded" in exc_info.value.message
    messages = store.get_session_messages(session.id)
    assert [m.role for m in messages] == [MessageRole.ai, MessageRole.user]
    assert messages[-1].content == "My answer"


def test_analysis_failure_keeps_both_messages(manager, store, fake_client):
    session = run(manager.create_session("sales"))
    run(manager.send_message(session.id, "First"))
    fake_client.analyses = [ServiceError("bad json")]

    with pytest.raises(ProcessingError):
        run(manager.send_message(session.id, "Second"))

    assert store.count_messages(session.id, MessageRole.user) == 2
    assert store.count_messages(session.id, MessageRole.ai) == 3
    assert store.get_session_feedback(session.id) == []


def test_concurrent_submissions_are_serialized(manager, store, fake_client):
    fake_client.respond_delay = 0.01

    async def scenario():
        session = await manager.create_session("sales")
        await asyncio.gather(
            manager.send_message(session.id, "first"),
            manager.send_message(session.id, "second"),
        )
        return session

    session = run(scenario())
    roles = [m.role for m in store.get_session_messages(session.id)]
    assert roles == [MessageRole.ai, MessageRole.user, MessageRole.ai, MessageRole.user, MessageRole.ai]
    assert len(store.get_session_feedback(session.id)) == 1


def test_unexpected_client_error_becomes_processing_error(manager, store, fake_client):
    session = run(manager.create_session("sales"))
    fake_client.respond_error = RuntimeError("sdk blew up")

    with pytest.raises(ProcessingError) as exc_info:
        run(manager.send_message(session.id, "My answer"))

    assert "sdk blew up" in exc_info.value.message
    assert [m.role for m in store.get_session_messages(session.id)] == [MessageRole.ai, MessageRole.user]


def test_end_waits_for_turn_in_progress(manager, store, fake_client):
    fake_client.respond_delay = 0.01

    async def scenario():
        session = await manager.create_session("sales")
        _, summary = await asyncio.gather(
            manager.send_message(session.id, "first"),
            manager.end_session(session.id),
        )
        return session, summary

    session, summary = run(scenario())
    roles = [m.role for m in store.get_session_messages(session.id)]
    assert roles == [MessageRole.ai, MessageRole.user, MessageRole.ai]
    assert len(summary.detailed) == 1
    assert summary.detailed[0].answer == "first"
    assert store.get_session(session.id).status == SessionStatus.completed
    assert len(manager.locks) == 0
