"""
Lesson pipeline API
Stage execution endpoint and pipeline health check.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from lesson_planner.agents.models import STAGE_KEYS, parse_stage_request
from lesson_planner.agents.orchestrator import LessonPipelineOrchestrator, get_orchestrator
from lesson_planner.core.exceptions import (
    CurriculumNotFound,
    GenerationFailed,
    MalformedOutput,
    MissingVariable,
    StageNotReady,
    Unauthorized,
)
from lesson_planner.utils.auth import verify_token

router = APIRouter()
logger = logging.getLogger(__name__)

CURRICULUM_HINT = "ลองระบุชื่อเรื่องหรือระดับชั้นให้กว้างขึ้น หรือเลือกกลุ่มสาระการเรียนรู้อื่น"


@router.get("/health")
async def pipeline_health(orchestrator: LessonPipelineOrchestrator = Depends(get_orchestrator)):
    """Index the reference corpus and report feature flags. No LLM call."""
    return await orchestrator.health_check()


@router.post("/{stage_key}")
async def run_stage(
    stage_key: str,
    payload: dict[str, Any] = Body(default={}),
    user_info: dict = Depends(verify_token),
    orchestrator: LessonPipelineOrchestrator = Depends(get_orchestrator),
):
    """
    Run one pipeline stage for the authenticated user.

    Stage keys: 0, 1, parallel-1-2, batch, legacy-0..legacy-3, reflect
    """
    if stage_key not in STAGE_KEYS:
        raise HTTPException(status_code=400, detail=f"Unknown stage '{stage_key}'")

    try:
        request = parse_stage_request(stage_key, payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e

    try:
        return await orchestrator.run_stage(user_info["user_id"], request)
    except HTTPException:
        raise
    except CurriculumNotFound as e:
        raise HTTPException(
            status_code=404,
            detail={"message": "ไม่พบข้อมูลหลักสูตร กรุณาลองใหม่", "hint": CURRICULUM_HINT},
        ) from e
    except Unauthorized as e:
        raise HTTPException(status_code=404, detail="Session not found or unauthorized") from e
    except StageNotReady as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except (GenerationFailed, MalformedOutput, MissingVariable) as e:
        logger.error(f"❌ Generation failed for stage {stage_key}: {e}")
        raise HTTPException(status_code=502, detail="Internal processing error") from e
    except Exception as e:
        logger.error(f"Error running stage {stage_key}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal processing error") from e
