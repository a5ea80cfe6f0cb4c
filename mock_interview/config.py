"""
Configuration for the mock interview backend.

Everything is read from environment variables (a `.env` file is loaded by
`app.py` before this module is used). Defaults keep the service runnable
offline with the template interviewer.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional


# ==================== Defaults ====================

LLM_PROVIDER = "template"  # template | openai | gemini
OPENAI_MODEL = "gpt-4.1-nano"
GEMINI_MODEL = "gemini-2.5-flash"

LLM_TIMEOUT_SECONDS = 60.0
LLM_MAX_RETRIES = 0
LLM_RETRY_BACKOFF = 0.6

ALLOWED_ORIGINS = "http://localhost:5173"

RATE_LIMIT_SESSIONS = "10/hour"  # Max 10 session creations per hour
RATE_LIMIT_MESSAGES = "60/hour"  # Max 60 messages per hour

LOG_LEVEL = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings."""

    llm_provider: str = LLM_PROVIDER
    openai_api_key: Optional[str] = None
    openai_model: str = OPENAI_MODEL
    openai_base_url: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = GEMINI_MODEL

    llm_timeout_seconds: float = LLM_TIMEOUT_SECONDS
    llm_max_retries: int = LLM_MAX_RETRIES
    llm_retry_backoff: float = LLM_RETRY_BACKOFF

    allowed_origins: List[str] = field(default_factory=lambda: [ALLOWED_ORIGINS])

    rate_limit_enabled: bool = True
    rate_limit_sessions: str = RATE_LIMIT_SESSIONS
    rate_limit_messages: str = RATE_LIMIT_MESSAGES

    log_level: str = LOG_LEVEL
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", LLM_PROVIDER).strip().lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", OPENAI_MODEL),
            openai_base_url=os.getenv("OPENAI_BASE_URL"),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", GEMINI_MODEL),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", LLM_TIMEOUT_SECONDS)),
            llm_max_retries=int(os.getenv("LLM_MAX_RETRIES", LLM_MAX_RETRIES)),
            llm_retry_backoff=float(os.getenv("LLM_RETRY_BACKOFF", LLM_RETRY_BACKOFF)),
            allowed_origins=_env_list("ALLOWED_ORIGINS", ALLOWED_ORIGINS),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            rate_limit_sessions=os.getenv("RATE_LIMIT_SESSIONS", RATE_LIMIT_SESSIONS),
            rate_limit_messages=os.getenv("RATE_LIMIT_MESSAGES", RATE_LIMIT_MESSAGES),
            log_level=os.getenv("LOG_LEVEL", LOG_LEVEL).upper(),
            log_file=os.getenv("LOG_FILE") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
