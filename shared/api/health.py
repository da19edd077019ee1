"""Health check API endpoints."""
from fastapi import APIRouter

from config import get_settings
from database import get_db_manager

router = APIRouter(tags=["health"])


@router.get("/")
def read_root():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": "Essay Writer Backend",
        "version": "1.0.0",
        "providers": {
            "openai": bool(settings.openai_api_key),
            "gemini": bool(settings.gemini_api_key),
            "groq": bool(settings.groq_api_key),
        },
    }


@router.get("/health/db")
def database_health():
    """Database health check."""
    if get_db_manager().health_check():
        return {"status": "ok", "database": "connected"}
    return {"status": "error", "database": "connection_failed"}
