"""
Session manager.

Single entry point for the routers: owns the store, the interviewer client
and the per-session locks, seeds new sessions with their opening question
and delegates turns and session end to the core.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from mock_interview.config import Settings, get_settings
from mock_interview.core.aggregator import FeedbackAggregator
from mock_interview.core.errors import InvalidRequestError, ServiceError, SessionNotFoundError
from mock_interview.core.lifecycle import SessionLocks
from mock_interview.core.orchestrator import TurnOrchestrator, TurnResult
from mock_interview.core.prompt_templates import FALLBACK_OPENING
from mock_interview.domain.models import Feedback, FinalFeedback, Message, MessageRole, Session
from mock_interview.domain.roles import InterviewRole
from mock_interview.services.gemini_client import GeminiInterviewClient
from mock_interview.services.interviewer import GuardedInterviewClient, InterviewClient
from mock_interview.services.openai_client import OpenAIInterviewClient
from mock_interview.services.storage import StorageService, get_storage
from mock_interview.services.template_client import TemplateInterviewClient

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages interview sessions.

    Each session has:
    - A stored Session record (role, status, timestamps)
    - An append-only message transcript, opened by the interviewer
    - Per-turn feedback and, once ended, one final feedback record
    """

    def __init__(self, store: StorageService, client: InterviewClient):
        # the core only handles ServiceError, so every client goes through the guard
        if not isinstance(client, GuardedInterviewClient):
            client = GuardedInterviewClient(client)
        self.store = store
        self.client = client
        self.locks = SessionLocks()
        self.orchestrator = TurnOrchestrator(store, client, self.locks)
        self.aggregator = FeedbackAggregator(store, client, self.locks)

    async def create_session(self, role: str) -> Session:
        """
        Create a new interview session and seed its opening question.

        The opening is generated before the session is stored, so readers
        never see a session without its first message.

        Args:
            role: Requested role; unknown values fall back to software_engineer

        Returns:
            The stored session

        Raises:
            InvalidRequestError: Blank role
        """
        if not str(role).strip():
            raise InvalidRequestError("Role is required")

        interview_role = InterviewRole.parse(role)
        if interview_role.value != str(role).strip().lower():
            logger.warning("[SESSION] Unknown role %r, using %s", role, interview_role.value)

        try:
            opening = await self.client.initial_question(interview_role)
        except ServiceError as e:
            logger.warning("[SESSION] Opening question failed for %s, using fallback: %s",
                           interview_role.value, e.message)
            opening = FALLBACK_OPENING

        # no await between these two writes: the session is never listed without its opening
        session = self.store.create_session(interview_role)
        self.store.create_message(session.id, MessageRole.ai, opening)

        logger.info("[SESSION] Created session %s (%s, interviewer=%s)",
                    session.id, interview_role.value, self.client.name)
        return session

    def list_sessions(self) -> List[Session]:
        return self.store.list_sessions()

    def get_session(self, session_id: str) -> Session:
        session = self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def get_messages(self, session_id: str) -> List[Message]:
        self.get_session(session_id)
        return self.store.get_session_messages(session_id)

    def get_feedback(self, session_id: str) -> List[Feedback]:
        self.get_session(session_id)
        return self.store.get_session_feedback(session_id)

    async def send_message(self, session_id: str, content: str) -> TurnResult:
        return await self.orchestrator.submit_user_message(session_id, content)

    async def end_session(self, session_id: str) -> FinalFeedback:
        return await self.aggregator.end_session(session_id)


# ==================== Client Factory ====================

def build_interview_client(settings: Settings) -> InterviewClient:
    """Create the configured provider, wrapped with timeout/retry policy."""
    provider = settings.llm_provider
    if provider == "openai":
        inner: InterviewClient = OpenAIInterviewClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
        )
    elif provider == "gemini":
        inner = GeminiInterviewClient(api_key=settings.gemini_api_key, model=settings.gemini_model)
    else:
        if provider != "template":
            logger.warning("[LLM] Unknown LLM_PROVIDER %r, using template interviewer", provider)
        inner = TemplateInterviewClient()

    return GuardedInterviewClient(
        inner,
        timeout=settings.llm_timeout_seconds,
        retries=settings.llm_max_retries,
        backoff_base=settings.llm_retry_backoff,
    )


# ==================== Global Instance ====================

_session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(get_storage(), build_interview_client(get_settings()))
    return _session_manager
