"""
Exception hierarchy for the interview core.

Routers translate these into `{"error": ...}` JSON bodies; see `app.py`.
"""
from __future__ import annotations


class InterviewError(Exception):
    """Base class for every error raised by the interview core."""

    status_code = 500

    def __init__(self, message: str, session_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id


class SessionNotFoundError(InterviewError):
    """Unknown session id."""

    status_code = 404

    def __init__(self, session_id: str):
        super().__init__("Session not found", session_id=session_id)


class InvalidSessionStateError(InterviewError):
    """Operation is not legal for the session's current status."""

    status_code = 400


class InvalidRequestError(InterviewError):
    """Malformed request payload."""

    status_code = 400


class ServiceError(InterviewError):
    """A generation/analysis collaborator call failed."""


class ServiceUnavailableError(ServiceError):
    """The collaborator cannot be reached at all (credentials, network).

    Unlike a plain ServiceError this is not specific to one request,
    so it is never retried and it aborts final feedback aggregation.
    """


class ProcessingError(InterviewError):
    """A turn could not be completed after the user message was stored."""


class AggregationError(InterviewError):
    """Final feedback could not be produced. The session is still completed."""
