"""
Turn orchestrator.

Handles one candidate message: store it, get the interviewer's next turn,
and every second answer attach per-turn feedback to it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mock_interview.core.errors import ProcessingError, ServiceError, SessionNotFoundError
from mock_interview.core.lifecycle import SessionLocks, ensure_active
from mock_interview.core.transcript import find_question
from mock_interview.domain.models import Feedback, Message, MessageRole
from mock_interview.services.interviewer import InterviewClient, to_chat_history
from mock_interview.services.storage import StorageService

logger = logging.getLogger(__name__)


FEEDBACK_EVERY = 2


def feedback_due(prior_user_messages: int) -> bool:
    """
    Whether the incoming answer gets per-turn feedback.

    `prior_user_messages` is the number of user messages stored *before*
    the incoming one. Feedback is due on the 2nd, 4th, 6th... answer,
    i.e. when that prior count is odd.
    """
    return (prior_user_messages + 1) % FEEDBACK_EVERY == 0


@dataclass
class TurnResult:
    userMessage: Message
    aiMessage: Message
    feedback: Optional[Feedback] = None


class TurnOrchestrator:
    def __init__(
        self,
        store: StorageService,
        client: InterviewClient,
        locks: Optional[SessionLocks] = None,
    ) -> None:
        self.store = store
        self.client = client
        self.locks = locks or SessionLocks()

    async def submit_user_message(self, session_id: str, content: str) -> TurnResult:
        """
        Process one candidate answer.

        The user message is stored before any service call and is kept
        if that call fails; the caller gets a ProcessingError.

        Raises:
            SessionNotFoundError: Unknown session id
            InvalidSessionStateError: Session already completed
            ProcessingError: Interviewer reply or analysis failed
        """
        async with self.locks.hold(session_id):
            session = self.store.get_session(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            ensure_active(session)

            prior_answers = self.store.count_messages(session_id, MessageRole.user)
            user_message = self.store.create_message(session_id, MessageRole.user, content)
            transcript = self.store.get_session_messages(session_id)

            try:
                reply = await self.client.respond(session.role, to_chat_history(transcript))
            except ServiceError as e:
                logger.error("[TURN] Interviewer reply failed for session %s: %s", session_id, e.message)
                raise ProcessingError(f"Failed to process message: {e.message}", session_id=session_id) from e

            ai_message = self.store.create_message(session_id, MessageRole.ai, reply)

            feedback = None
            if feedback_due(prior_answers):
                position = next(i for i, m in enumerate(transcript) if m.id == user_message.id)
                question = find_question(transcript, position)
                try:
                    analysis = await self.client.analyze(content, question, session.role)
                except ServiceError as e:
                    logger.error("[FEEDBACK] Answer analysis failed for session %s: %s", session_id, e.message)
                    raise ProcessingError(f"Failed to analyze answer: {e.message}", session_id=session_id) from e
                feedback = self.store.create_feedback(session_id, user_message.id, analysis)
                logger.info(
                    "[FEEDBACK] Per-turn feedback for answer #%d in session %s (score=%d)",
                    prior_answers + 1, session_id, feedback.overallScore,
                )

        return TurnResult(userMessage=user_message, aiMessage=ai_message, feedback=feedback)
