"""
Curriculum retrieval and extraction.

Retrieves the nearest curriculum passages for a subject/topic/level, asks the
model to pick the matching standard and indicators, then derives learning
content and key content from them.
"""

import logging
import time
from typing import Any

from lesson_planner.agents.models import CurriculumQuery
from lesson_planner.agents.state import PipelineDeps, PipelineState
from lesson_planner.agents.utils.generation import generate_json
from lesson_planner.core.exceptions import CurriculumNotFound, MalformedOutput
from lesson_planner.services.curriculum_retriever import RetrievedPassage
from lesson_planner.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

NOT_FOUND_MARKERS = ("ไม่พบ", "NOT_FOUND")

CURRICULUM_KEYS = ("มาตรฐาน", "ตัวชี้วัดระหว่างทาง", "ตัวชี้วัดปลายทาง")
CONTENT_KEYS = ("สาระการเรียนรู้", "สาระสำคัญ")


def build_search_key(subject: str, lesson_topic: str, level: str) -> str:
    return f"กลุ่มสาระ: {subject} เรื่อง: {lesson_topic} ระดับชั้น: {level}".strip()


def parse_curriculum_answer(raw: str) -> dict[str, Any]:
    """
    Parse the curriculum lookup answer.

    Raises:
        CurriculumNotFound: The model reported no match, either as JSON
            ("found": false) or as a bare not-found message
        MalformedOutput: The answer is unusable for any other reason
    """
    try:
        data = extract_json_object(raw)
    except MalformedOutput:
        if any(marker in raw for marker in NOT_FOUND_MARKERS):
            raise CurriculumNotFound(reason=raw[:200]) from None
        raise

    if data.get("found") is False:
        raise CurriculumNotFound(reason=str(data.get("reason", ""))[:200])

    missing = [key for key in CURRICULUM_KEYS if key not in data]
    if missing:
        raise MalformedOutput(f"Curriculum answer is missing keys: {', '.join(missing)}", raw_text=raw)

    data.pop("found", None)
    return data


async def retrieve_passages(query: CurriculumQuery, deps: PipelineDeps) -> list[RetrievedPassage]:
    """
    Resolve the subject's corpus and fetch the nearest passages.

    Raises:
        CurriculumNotFound: No passage matched (CorpusUnavailable if the corpus itself is missing)
    """
    async def build_index():
        return await deps.retriever.index_for_subject(query.subject)

    index = await deps.retry.run(build_index, label=f"index {query.subject}")
    search_key = build_search_key(query.subject, query.lesson_topic, query.level)
    passages = await deps.retriever.search(index, search_key, deps.settings.retrieval_top_k)

    if not passages:
        logger.warning(f"⚠️  No curriculum passages for '{search_key}'")
        raise CurriculumNotFound(subject=query.subject, lesson_topic=query.lesson_topic, level=query.level)

    logger.info(f"📚 Retrieved {len(passages)} passages from {index.corpus_id}")
    return passages


async def extract_curriculum(
    query: CurriculumQuery, passages: list[RetrievedPassage], deps: PipelineDeps
) -> dict[str, Any]:
    """Run the curriculum lookup and content calls; returns the merged answer."""
    context = "\n\n".join(passage.text for passage in passages)

    curriculum = await generate_json(
        deps,
        "curriculum-query",
        {
            "context": context,
            "subject": query.subject,
            "lesson_topic": query.lesson_topic,
            "level": query.level or "ไม่ระบุ",
        },
        parse=parse_curriculum_answer,
    )

    content = await generate_json(
        deps,
        "curriculum-content",
        {
            "standard": curriculum["มาตรฐาน"],
            "interim_indicators": curriculum["ตัวชี้วัดระหว่างทาง"],
            "final_indicators": curriculum["ตัวชี้วัดปลายทาง"],
        },
        required_keys=CONTENT_KEYS,
    )

    return {**curriculum, **content}


async def compute_curriculum(query: CurriculumQuery, deps: PipelineDeps) -> dict[str, Any]:
    """Full stage-0 curriculum derivation without touching any session."""
    passages = await retrieve_passages(query, deps)
    return await extract_curriculum(query, passages, deps)


def curriculum_fields(query: CurriculumQuery, curriculum: dict[str, Any]) -> dict[str, Any]:
    return {
        "subject": query.subject,
        "lesson_topic": query.lesson_topic,
        "level": query.level,
        "learning_area": curriculum.get("กลุ่มสาระการเรียนรู้"),
        "standard": curriculum["มาตรฐาน"],
        "interim_indicators": curriculum["ตัวชี้วัดระหว่างทาง"],
        "final_indicators": curriculum["ตัวชี้วัดปลายทาง"],
        "content": curriculum["สาระการเรียนรู้"],
        "key_content": curriculum["สาระสำคัญ"],
    }


# ===== GRAPH NODES =====


def _query_from_state(state: PipelineState) -> CurriculumQuery:
    return CurriculumQuery(
        subject=state["subject"],
        lesson_topic=state["lesson_topic"],
        level=state.get("level", ""),
    )


async def retrieve_curriculum(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    logger.info(f"🔍 Retrieving curriculum for {state['subject']} - {state['lesson_topic']}")
    passages = await retrieve_passages(_query_from_state(state), deps)
    return {"passages": passages}


async def generate_curriculum(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    start_time = time.time()
    query = _query_from_state(state)
    curriculum = await extract_curriculum(query, state["passages"], deps)

    logger.info(f"✅ Curriculum extracted in {time.time() - start_time:.2f}s")
    return {
        "curriculum": curriculum,
        "pending": {**state.get("pending", {}), **curriculum_fields(query, curriculum)},
    }
