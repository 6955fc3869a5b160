from fastapi import APIRouter

from app.core import settings

router = APIRouter()


@router.get("", tags=["health"])
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "calendar_configured": settings.google_configured,
        "scheduler_auth": bool(settings.scheduler_jwt_secret),
    }
