"""
Final feedback aggregation.

Ending a session completes it first, then analyses every question/answer
pair of the transcript afresh and reduces the results to one summary:

- strengths / improvements: 3 most frequent strings
- suggestions: 5 most frequent strings
- overallScore: mean of the per-pair scores, rounded half-up (0 if no answers)

Frequency is by exact string; ties keep first-seen order.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from mock_interview.core.errors import (
    AggregationError,
    ServiceError,
    ServiceUnavailableError,
    SessionNotFoundError,
)
from mock_interview.core.lifecycle import SessionLocks, complete, utcnow
from mock_interview.core.transcript import question_answer_pairs
from mock_interview.domain.models import AnswerAnalysis, FinalFeedback, PairFeedback, Session
from mock_interview.services.interviewer import InterviewClient
from mock_interview.services.storage import StorageService

logger = logging.getLogger(__name__)


TOP_STRENGTHS = 3
TOP_IMPROVEMENTS = 3
TOP_SUGGESTIONS = 5

UNANALYZED_SUGGESTION = "Could not analyze this response."


def unanalyzed() -> AnswerAnalysis:
    """Placeholder for an answer whose analysis failed."""
    return AnswerAnalysis(
        strengths=[],
        improvements=[],
        suggestions=[UNANALYZED_SUGGESTION],
        overallScore=0,
    )


def top_by_frequency(groups: Iterable[List[str]], limit: int) -> List[str]:
    counts: Counter = Counter()
    for items in groups:
        counts.update(items)
    # most_common is stable, so equal counts stay in first-seen order
    return [text for text, _ in counts.most_common(limit)]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def summarize_feedback(items: List[PairFeedback]) -> FinalFeedback:
    """Reduce per-pair analyses into the session summary."""
    if items:
        score = round_half_up(sum(item.overallScore for item in items) / len(items))
    else:
        score = 0

    return FinalFeedback(
        strengths=top_by_frequency((i.strengths for i in items), TOP_STRENGTHS),
        improvements=top_by_frequency((i.improvements for i in items), TOP_IMPROVEMENTS),
        suggestions=top_by_frequency((i.suggestions for i in items), TOP_SUGGESTIONS),
        overallScore=score,
        detailed=list(items),
    )


class FeedbackAggregator:
    def __init__(
        self,
        store: StorageService,
        client: InterviewClient,
        locks: Optional[SessionLocks] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.client = client
        self.locks = locks or SessionLocks()
        self.clock = clock

    async def end_session(self, session_id: str) -> FinalFeedback:
        """
        Complete the session and store its final feedback.

        The status change is saved before any analysis runs, so a session
        ends even when no summary can be produced.

        Raises:
            SessionNotFoundError: Unknown session id
            InvalidSessionStateError: Session already completed
            AggregationError: Analysis service unavailable; no final record stored
        """
        async with self.locks.hold(session_id):
            session = self.store.get_session(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)

            session = self.store.save_session(complete(session, self.clock()))
            logger.info("[SESSION] Session %s completed", session_id)

            transcript = self.store.get_session_messages(session_id)
            detailed = []
            for question, answer in question_answer_pairs(transcript):
                analysis = await self._analyze_pair(session, question, answer.content)
                detailed.append(PairFeedback(question=question, answer=answer.content, **analysis.model_dump()))

            summary = summarize_feedback(detailed)
            self.store.create_feedback(
                session_id,
                None,
                AnswerAnalysis(
                    strengths=summary.strengths,
                    improvements=summary.improvements,
                    suggestions=summary.suggestions,
                    overallScore=summary.overallScore,
                ),
            )
            logger.info(
                "[FEEDBACK] Final feedback for session %s: %d answers, score=%d",
                session_id, len(detailed), summary.overallScore,
            )
            return summary

    async def _analyze_pair(self, session: Session, question: str, answer: str) -> AnswerAnalysis:
        try:
            return await self.client.analyze(answer, question, session.role)
        except ServiceUnavailableError as e:
            logger.error("[FEEDBACK] Analysis unavailable, no final feedback for session %s: %s", session.id, e.message)
            raise AggregationError(
                f"Session ended but final feedback is unavailable: {e.message}",
                session_id=session.id,
            ) from e
        except ServiceError as e:
            logger.warning("[FEEDBACK] Could not analyze an answer in session %s: %s", session.id, e.message)
            return unanalyzed()
