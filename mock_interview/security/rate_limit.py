"""
Rate limiting for the session endpoints (slowapi, keyed by client address).
"""
from typing import Dict

from slowapi import Limiter
from slowapi.util import get_remote_address

from mock_interview.config import RATE_LIMIT_MESSAGES, RATE_LIMIT_SESSIONS, Settings


limiter = Limiter(key_func=get_remote_address)

_limits: Dict[str, str] = {
    "sessions": RATE_LIMIT_SESSIONS,
    "messages": RATE_LIMIT_MESSAGES,
}


def configure_rate_limits(settings: Settings) -> Limiter:
    limiter.enabled = settings.rate_limit_enabled
    _limits["sessions"] = settings.rate_limit_sessions
    _limits["messages"] = settings.rate_limit_messages
    return limiter


def session_limit() -> str:
    return _limits["sessions"]


def message_limit() -> str:
    return _limits["messages"]
