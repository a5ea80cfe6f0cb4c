"""
Interviewer client contract.

The core talks to the language model only through `InterviewClient`:
opening question, next interviewer turn, and critique of one answer.
Concrete providers live in `openai_client`, `gemini_client` and
`template_client`; `GuardedInterviewClient` wraps any of them with a
timeout and bounded retries and guarantees that every failure surfaces
as a `ServiceError`.
"""
from __future__ import annotations

import asyncio
import json
import logging
import math
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from mock_interview.core.errors import ServiceError, ServiceUnavailableError
from mock_interview.domain.models import AnswerAnalysis, ChatTurn, Message, MessageRole
from mock_interview.domain.roles import InterviewRole

logger = logging.getLogger(__name__)


class InterviewClient:
    """Generation and analysis collaborator."""

    name = "abstract"

    async def initial_question(self, role: InterviewRole) -> str:
        raise NotImplementedError

    async def respond(self, role: InterviewRole, history: List[ChatTurn]) -> str:
        raise NotImplementedError

    async def analyze(self, answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
        raise NotImplementedError


def to_chat_history(messages: Iterable[Message]) -> List[ChatTurn]:
    """Map stored messages to the model's assistant/user vocabulary."""
    return [
        ChatTurn(
            role="assistant" if m.role == MessageRole.ai else "user",
            content=m.content,
        )
        for m in messages
    ]


# ==================== Analysis Output ====================

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "strengths": {"type": "array", "items": {"type": "string"}},
        "improvements": {"type": "array", "items": {"type": "string"}},
        "suggestions": {"type": "array", "items": {"type": "string"}},
        "overallScore": {"type": "number"},
    },
}

DEFAULT_SCORE = 3


def clamp_score(value: Optional[float]) -> int:
    """
    Round half-up into the 1..5 range; missing or zero scores count as 3.

    Raises:
        ServiceError: NaN or infinite score
    """
    if not value:
        return DEFAULT_SCORE
    if not math.isfinite(value):
        raise ServiceError(f"Analysis score is not a finite number: {value}")
    return max(1, min(5, math.floor(value + 0.5)))


def parse_analysis(text: Optional[str]) -> AnswerAnalysis:
    """
    Parse the model's JSON critique.

    Raises:
        ServiceError: If the text is not a JSON object of the expected shape
    """
    try:
        payload = json.loads(text or "{}")
    except json.JSONDecodeError as e:
        raise ServiceError(f"Analysis response is not valid JSON: {e}") from e

    try:
        validate(instance=payload, schema=ANALYSIS_SCHEMA)
    except SchemaValidationError as e:
        raise ServiceError(f"Analysis response has unexpected shape: {e.message}") from e

    return AnswerAnalysis(
        strengths=payload.get("strengths") or [],
        improvements=payload.get("improvements") or [],
        suggestions=payload.get("suggestions") or [],
        overallScore=clamp_score(payload.get("overallScore")),
    )


# ==================== Timeout / Retry Guard ====================

class GuardedInterviewClient(InterviewClient):
    """
    Apply a per-call timeout and bounded retries to another client.

    Retries use exponential backoff (`backoff_base * 2 ** attempt`).
    `ServiceUnavailableError` is raised immediately; anything else that is
    not already a `ServiceError` is wrapped in one.
    """

    def __init__(
        self,
        inner: InterviewClient,
        timeout: Optional[float] = 60.0,
        retries: int = 0,
        backoff_base: float = 0.6,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.inner = inner
        self.name = inner.name
        self.timeout = timeout if timeout and timeout > 0 else None
        self.retries = max(0, retries)
        self.backoff_base = backoff_base
        self._sleep = sleep

    async def initial_question(self, role: InterviewRole) -> str:
        return await self._call("initial_question", self.inner.initial_question, role)

    async def respond(self, role: InterviewRole, history: List[ChatTurn]) -> str:
        return await self._call("respond", self.inner.respond, role, history)

    async def analyze(self, answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
        return await self._call("analyze", self.inner.analyze, answer, question, role)

    async def _call(self, operation: str, func: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(func(*args), timeout=self.timeout)
            except ServiceUnavailableError:
                raise
            except asyncio.TimeoutError as e:
                error = ServiceError(f"{self.name}.{operation} timed out after {self.timeout}s")
                error.__cause__ = e
            except ServiceError as e:
                error = e
            except Exception as e:
                error = ServiceError(f"{self.name}.{operation} failed: {e}")
                error.__cause__ = e

            if attempt >= self.retries:
                raise error

            delay = self.backoff_base * (2 ** attempt)
            logger.warning(
                "[LLM] %s.%s failed (attempt %d/%d), retrying in %.1fs: %s",
                self.name, operation, attempt + 1, self.retries + 1, delay, error.message,
            )
            await self._sleep(delay)
            attempt += 1
