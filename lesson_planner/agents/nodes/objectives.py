"""
Learning objectives generation from the persisted curriculum fields.
"""

import logging
from typing import Any

from lesson_planner.agents.models import KEY_COMPETENCIES, Session
from lesson_planner.agents.state import PipelineDeps, PipelineState
from lesson_planner.agents.utils.generation import generate_json, require_fields

logger = logging.getLogger(__name__)

OBJECTIVES_KEY = "จุดประสงค์การเรียนรู้"
COMPETENCIES_KEY = "สมรรถนะผู้เรียน"


async def compute_objectives(session: Session, deps: PipelineDeps, stage: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Returns:
        (client response, session fields to persist)
    """
    require_fields(stage, session, ("content",))

    logger.info("🎯 Generating learning objectives...")
    result = await generate_json(
        deps,
        "objectives",
        {
            "subject": session.subject or "",
            "level": session.level or "ไม่ระบุ",
            "content": session.content,
            "interim_indicators": session.interim_indicators or [],
            "final_indicators": session.final_indicators or [],
        },
    )
    objectives = result.get(OBJECTIVES_KEY, result)

    response = {OBJECTIVES_KEY: objectives, COMPETENCIES_KEY: dict(KEY_COMPETENCIES)}
    fields = {"objectives": objectives, "key_competencies": dict(KEY_COMPETENCIES)}
    return response, fields


async def generate_objectives(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    response, fields = await compute_objectives(state["session"], deps, state["stage"])
    return {"objectives_result": response, "pending": {**state.get("pending", {}), **fields}}
