"""
Evaluation rubric generation from the persisted lesson plan.
"""

import logging
from typing import Any

from lesson_planner.agents.models import Session
from lesson_planner.agents.state import PipelineDeps, PipelineState
from lesson_planner.agents.utils.generation import generate_json, require_fields

logger = logging.getLogger(__name__)


async def compute_evaluation(session: Session, deps: PipelineDeps, stage: str) -> dict[str, Any]:
    require_fields(stage, session, ("lesson_plan",))

    logger.info("📝 Generating evaluation rubric...")
    return await generate_json(
        deps,
        "evaluation-design",
        {
            "lesson_plan": session.lesson_plan,
            "interim_indicators": session.interim_indicators or [],
        },
    )


async def generate_evaluation(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    evaluation = await compute_evaluation(state["session"], deps, state["stage"])
    return {"evaluation": evaluation, "pending": {**state.get("pending", {}), "evaluation": evaluation}}
