"""
Lesson sessions API
Read-only view of a session so clients can resume where they stopped.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from lesson_planner.agents.orchestrator import LessonPipelineOrchestrator, get_orchestrator
from lesson_planner.core.exceptions import Unauthorized
from lesson_planner.utils.auth import verify_token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    user_info: dict = Depends(verify_token),
    orchestrator: LessonPipelineOrchestrator = Depends(get_orchestrator),
):
    try:
        return await orchestrator.get_stage_view(user_info["user_id"], session_id)
    except Unauthorized as e:
        raise HTTPException(status_code=404, detail="Session not found or unauthorized") from e
    except Exception as e:
        logger.error(f"Error loading session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load session") from e
