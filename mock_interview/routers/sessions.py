"""
FastAPI router for interview sessions.

Thin adapter over the SessionManager: validation happens in the request
models, business rules in the core, and errors are rendered as
`{"error": ...}` by the handlers registered in `app.py`.
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status

from mock_interview.domain.models import (
    CreateSessionRequest,
    EndSessionResponse,
    ErrorResponse,
    Feedback,
    Message,
    SendMessageRequest,
    SendMessageResponse,
    Session,
)
from mock_interview.security.rate_limit import limiter, message_limit, session_limit
from mock_interview.services.session_manager import SessionManager, get_session_manager


# ==================== Router Setup ====================

router = APIRouter(
    prefix="/api/sessions",
    tags=["Interview Sessions"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


# ==================== Endpoints ====================

@router.get(
    "",
    response_model=List[Session],
    summary="List sessions",
    description="All interview sessions, newest first."
)
async def list_sessions(manager: SessionManager = Depends(get_session_manager)) -> List[Session]:
    return manager.list_sessions()


@router.post(
    "",
    response_model=Session,
    status_code=status.HTTP_201_CREATED,
    summary="Create new interview session",
    description="Start a session for a role. The interviewer's opening question is stored as the first message."
)
@limiter.limit(session_limit)
async def create_session(
    request: Request,
    payload: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> Session:
    return await manager.create_session(payload.role)


@router.get(
    "/{session_id}",
    response_model=Session,
    summary="Get session details"
)
async def get_session(session_id: str, manager: SessionManager = Depends(get_session_manager)) -> Session:
    return manager.get_session(session_id)


@router.post(
    "/{session_id}/end",
    response_model=EndSessionResponse,
    summary="End session",
    description="Complete the session and generate final feedback over the whole transcript."
)
async def end_session(session_id: str, manager: SessionManager = Depends(get_session_manager)) -> EndSessionResponse:
    """
    End an active session.

    The session is marked completed even if feedback generation then fails;
    in that case the response is a 500 and no final feedback is stored.
    """
    feedback = await manager.end_session(session_id)
    return EndSessionResponse(success=True, feedback=feedback)


@router.get(
    "/{session_id}/messages",
    response_model=List[Message],
    summary="Get conversation",
    description="Messages of the session in chronological order."
)
async def get_messages(session_id: str, manager: SessionManager = Depends(get_session_manager)) -> List[Message]:
    return manager.get_messages(session_id)


@router.post(
    "/{session_id}/messages",
    response_model=SendMessageResponse,
    summary="Send message to session",
    description="Send the candidate's answer. Returns the stored answer and the interviewer's reply."
)
@limiter.limit(message_limit)
async def send_message(
    request: Request,
    session_id: str,
    payload: SendMessageRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SendMessageResponse:
    """
    Every second answer also gets per-turn feedback, readable from
    GET /api/sessions/{session_id}/feedback.
    """
    result = await manager.send_message(session_id, payload.content)
    return SendMessageResponse(userMessage=result.userMessage, aiMessage=result.aiMessage)


@router.get(
    "/{session_id}/feedback",
    response_model=List[Feedback],
    summary="Get feedback",
    description="Per-turn feedback first, then the final summary; chronological within each group."
)
async def get_feedback(session_id: str, manager: SessionManager = Depends(get_session_manager)) -> List[Feedback]:
    return manager.get_feedback(session_id)
