from datetime import UTC, datetime
from fastapi import APIRouter
import logging

from lesson_planner.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """Liveness endpoint, no external calls"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "message": "🚀 Backend is running smoothly!",
    }
