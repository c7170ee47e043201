"""
Activity design: enrichment followed by the nested UDL activity plan.
Also hosts the parallel node that computes objectives and activities together.
"""

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any

from lesson_planner.agents.models import EnrichmentBundle, LessonInputs, Session, StudentType
from lesson_planner.agents.nodes.objectives import compute_objectives
from lesson_planner.agents.state import PipelineDeps, PipelineState
from lesson_planner.agents.utils.generation import generate_json, require_fields
from lesson_planner.utils.lesson_timing import check_activity_minutes

logger = logging.getLogger(__name__)

ACTIVITIES_KEY = "กิจกรรมการเรียนรู้"
MATERIALS_KEY = "สื่อและอุปกรณ์"
RESEARCH_USAGE_KEY = "การใช้ข้อมูลจากการค้นคว้า"


def describe_student_types(student_types: Sequence[StudentType]) -> str:
    if not student_types:
        return "ไม่ระบุประเภทนักเรียน"
    return ", ".join(
        f"ประเภทที่ {idx}: {s.type} ({s.percentage:g}%)" for idx, s in enumerate(student_types, start=1)
    )


def build_search_metadata(bundle: EnrichmentBundle) -> dict[str, Any]:
    return {
        "searchPerformed": bundle.search_performed,
        "source": dict(bundle.source),
        "enhancedProcesses": list(bundle.teaching_process_examples),
        "udlStrategies": list(bundle.udl_strategies),
        "inclusiveStrategies": list(bundle.inclusive_strategies),
    }


async def enrich_session(session: Session, inputs: LessonInputs, deps: PipelineDeps) -> EnrichmentBundle:
    return await deps.enrichment.perform_enhanced_search(
        session.subject or "",
        session.lesson_topic or "",
        session.level or "",
        inputs.student_type,
    )


async def compute_activities(
    session: Session,
    inputs: LessonInputs,
    bundle: EnrichmentBundle,
    deps: PipelineDeps,
    stage: str,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Generate the activity plan, sized to study_period * 50 minutes.

    Returns:
        (client response, session fields to persist)
    """
    require_fields(stage, session, ("content",))
    total_minutes = inputs.total_minutes

    logger.info(
        f"🎨 Designing activities: {inputs.study_period} periods ({total_minutes} min), "
        f"{inputs.num_students} students, {len(inputs.student_type)} student types"
    )
    result = await generate_json(
        deps,
        "activity-design",
        {
            "content": session.content,
            "study_period": inputs.study_period,
            "total_minutes": total_minutes,
            "num_students": inputs.num_students,
            "student_types": describe_student_types(inputs.student_type),
            "teaching_process_examples": ", ".join(bundle.teaching_process_examples),
            "lesson_details": bundle.lesson_details,
            "udl_strategies": ", ".join(bundle.udl_strategies),
            "inclusive_strategies": ", ".join(bundle.inclusive_strategies),
        },
        required_keys=(ACTIVITIES_KEY,),
    )

    lesson_plan = result[ACTIVITIES_KEY]
    materials = result.get(MATERIALS_KEY) or {}
    enhanced_data = result.get(RESEARCH_USAGE_KEY) or bundle.model_dump(by_alias=True, exclude={"source"})
    search_metadata = build_search_metadata(bundle)
    timing = check_activity_minutes(lesson_plan, total_minutes)

    response = {
        "response": lesson_plan,
        "teachingMaterials": materials,
        "enhancedData": enhanced_data,
        "searchMetadata": search_metadata,
        "timing": timing,
    }
    fields = {
        "num_students": inputs.num_students,
        "study_period": inputs.study_period,
        "student_type": [s.model_dump() for s in inputs.student_type],
        "lesson_plan": lesson_plan,
        "teaching_materials": materials,
        "enhanced_data": enhanced_data,
        "search_metadata": search_metadata,
        "timing": timing,
    }
    return response, fields


# ===== GRAPH NODES =====


async def enrich_lesson(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    bundle = await enrich_session(state["session"], state["lesson_inputs"], deps)
    return {"enrichment": bundle}


async def design_activities(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    start_time = time.time()
    response, fields = await compute_activities(
        state["session"], state["lesson_inputs"], state["enrichment"], deps, state["stage"]
    )
    logger.info(f"✅ Activity plan generated in {time.time() - start_time:.2f}s")
    return {"lesson_result": response, "pending": {**state.get("pending", {}), **fields}}


async def objectives_and_activities(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    """
    Objectives and activities only depend on curriculum content, so they run
    concurrently. Fields are merged objectives-first whichever finishes first.
    """
    session = state["session"]
    inputs = state["lesson_inputs"]
    stage = state["stage"]
    require_fields(stage, session, ("content",))

    async def activities() -> tuple[dict[str, Any], dict[str, Any], EnrichmentBundle]:
        bundle = await enrich_session(session, inputs, deps)
        response, fields = await compute_activities(session, inputs, bundle, deps, stage)
        return response, fields, bundle

    start_time = time.time()
    (objectives_response, objectives_fields), (lesson_response, lesson_fields, bundle) = await asyncio.gather(
        compute_objectives(session, deps, stage),
        activities(),
    )
    logger.info(f"⚡ Objectives and activities generated in parallel in {time.time() - start_time:.2f}s")

    pending = {**state.get("pending", {}), **objectives_fields, **lesson_fields}
    return {
        "objectives_result": objectives_response,
        "lesson_result": lesson_response,
        "enrichment": bundle,
        "pending": pending,
    }
