"""
FastAPI application - Mock Interview API.

Role-based mock interviews with an AI interviewer, per-turn feedback
and a final feedback summary. Sessions are kept in memory.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables BEFORE reading settings
load_dotenv()

from mock_interview import __version__
from mock_interview.config import Settings, get_settings
from mock_interview.core.errors import InterviewError
from mock_interview.routers import health, sessions
from mock_interview.security.rate_limit import configure_rate_limits
from mock_interview.services.session_manager import SessionManager, get_session_manager
from mock_interview.utils import setup_logging

logger = logging.getLogger("mock_interview.app")


# ==================== Error Handlers ====================

async def interview_error_handler(request: Request, exc: InterviewError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[ERROR] %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid request"})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[ERROR] Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ==================== FastAPI App ====================

def create_app(
    settings: Optional[Settings] = None,
    manager: Optional[SessionManager] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Runtime settings (defaults to the environment)
        manager: Session manager to serve instead of the process-wide one
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.llm_provider == "openai" and not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not found; interviewer calls will fail")
        if settings.llm_provider == "gemini" and not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY not found; interviewer calls will fail")
        logger.info("Mock Interview API %s started (interviewer=%s, origins=%s)",
                    __version__, settings.llm_provider, settings.allowed_origins)
        yield
        logger.info("Mock Interview API shutting down")

    app = FastAPI(
        title="Mock Interview API",
        description="AI mock interviews with per-turn and final feedback",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Rate limiting
    app.state.limiter = configure_rate_limits(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(InterviewError, interview_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(sessions.router)

    if manager is not None:
        app.dependency_overrides[get_session_manager] = lambda: manager

    return app


_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_file)
app = create_app(_settings)


# ==================== Run Configuration ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
