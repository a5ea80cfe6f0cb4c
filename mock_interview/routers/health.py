from fastapi import APIRouter, Request

from mock_interview import __version__

router = APIRouter(tags=["Health"])


@router.get("/")
async def root():
    return {
        "message": "Mock Interview API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


@router.get("/health")
async def health_check(request: Request):
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
        "version": __version__,
    }
