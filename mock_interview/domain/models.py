"""
Pydantic models for the mock interview API.

Stored records (Session, Message, Feedback), the feedback shapes passed
between the core and the interviewer client, and request/response schemas.
JSON field names are camelCase to match the web client.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mock_interview.domain.roles import InterviewRole
from mock_interview.security.validators import validate_answer_text


class SessionStatus(str, Enum):
    active = "active"
    completed = "completed"


class MessageRole(str, Enum):
    ai = "ai"
    user = "user"


# ==================== Stored Records ====================

class Session(BaseModel):
    """One interview attempt for a single role."""

    id: str = Field(..., description="Session identifier (UUID)")
    role: InterviewRole = Field(..., description="Job role being practised")
    status: SessionStatus = Field(default=SessionStatus.active)
    createdAt: datetime
    completedAt: Optional[datetime] = Field(
        None,
        description="Set once, when the session is completed"
    )


class Message(BaseModel):
    """A single turn of the conversation. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    sessionId: str
    role: MessageRole
    content: str
    createdAt: datetime


class Feedback(BaseModel):
    """
    Stored feedback record.

    `messageId` points at the user message for per-turn feedback and is
    None for the final, session-level summary.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    sessionId: str
    messageId: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    overallScore: int = Field(0, ge=0, le=5, description="1-5, or 0 if unscored")
    createdAt: datetime

    @property
    def is_final(self) -> bool:
        return self.messageId is None


# ==================== Feedback Shapes ====================

class ChatTurn(BaseModel):
    """Conversation entry in the interviewer model's vocabulary."""

    role: Literal["assistant", "user"]
    content: str


class AnswerAnalysis(BaseModel):
    """Critique of one answer, as returned by the analysis service."""

    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    overallScore: int = Field(0, ge=0, le=5)


class PairFeedback(AnswerAnalysis):
    """Analysis of one question/answer pair from the transcript."""

    question: str
    answer: str


class FinalFeedback(BaseModel):
    """Session summary produced when an interview ends."""

    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    overallScore: int = 0
    detailed: List[PairFeedback] = Field(
        default_factory=list,
        description="Per-answer analyses the summary was reduced from"
    )


# ==================== Request Schemas ====================

class CreateSessionRequest(BaseModel):
    """Request to start a new interview session."""

    role: str = Field(
        ...,
        description="Role to practise; unknown values fall back to software_engineer",
        min_length=1,
        max_length=64,
        examples=["sales"]
    )

    status: Literal["active"] = Field(
        default="active",
        description="Initial status; sessions always start active"
    )


class SendMessageRequest(BaseModel):
    """Candidate answer sent to an active session."""

    content: str = Field(
        ...,
        description="Candidate's message/answer",
        min_length=1,
        max_length=5000,
        examples=["In my last role I led the migration of our billing service..."]
    )

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str) -> str:
        return validate_answer_text(value)


# ==================== Response Schemas ====================

class SendMessageResponse(BaseModel):
    userMessage: Message
    aiMessage: Message


class EndSessionResponse(BaseModel):
    success: bool = True
    feedback: FinalFeedback


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
