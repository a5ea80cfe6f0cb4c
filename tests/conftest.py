import asyncio

import pytest
from fastapi.testclient import TestClient

from app import create_app
from mock_interview.config import Settings
from mock_interview.domain.models import AnswerAnalysis
from mock_interview.services.interviewer import InterviewClient
from mock_interview.services.session_manager import SessionManager
from mock_interview.services.storage import InMemoryStorage


class FakeInterviewClient(InterviewClient):
    """Scripted interviewer. Queued analyses may be exceptions to raise."""

    name = "fake"

    def __init__(self):
        self.opening = "Hello! Tell me about yourself."
        self.replies = []
        self.analyses = []
        self.opening_error = None
        self.respond_error = None
        self.respond_delay = 0.0
        self.respond_calls = []
        self.analyze_calls = []

    async def initial_question(self, role):
        if self.opening_error:
            raise self.opening_error
        return self.opening

    async def respond(self, role, history):
        self.respond_calls.append((role, list(history)))
        if self.respond_delay:
            await asyncio.sleep(self.respond_delay)
        if self.respond_error:
            raise self.respond_error
        if self.replies:
            return self.replies.pop(0)
        return f"Question {len(self.respond_calls) + 1}?"

    async def analyze(self, answer, question, role):
        self.analyze_calls.append((answer, question, role))
        if self.analyses:
            item = self.analyses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return AnswerAnalysis(
            strengths=["Clear structure"],
            improvements=["More detail"],
            suggestions=["Use the STAR method"],
            overallScore=4,
        )


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def fake_client():
    return FakeInterviewClient()


@pytest.fixture
def store():
    return InMemoryStorage()


@pytest.fixture
def manager(store, fake_client):
    return SessionManager(store, fake_client)


@pytest.fixture
def test_settings():
    return Settings(
        llm_provider="template",
        rate_limit_enabled=False,
        rate_limit_sessions="1000/minute",
        rate_limit_messages="1000/minute",
    )


@pytest.fixture
def api(manager, test_settings):
    app = create_app(test_settings, manager)
    with TestClient(app) as client:
        yield client
