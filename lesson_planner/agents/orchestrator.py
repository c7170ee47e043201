"""
Pipeline orchestrator for lesson plan generation.

Routes a typed stage request to the transition table selected by the
session's pipeline_mode, enforces ownership and stage gating, runs the
stage's LangGraph and shapes the client response.
"""

import asyncio
import dataclasses
import logging
import time
import uuid
from datetime import UTC, datetime
from typing import Any

from lesson_planner.agents.models import (
    BatchStageRequest,
    CurriculumQuery,
    CurriculumStageRequest,
    LegacyCurriculumRequest,
    LessonInputs,
    ReflectionRequest,
    Session,
    StageRequest,
)
from lesson_planner.agents.nodes.curriculum import compute_curriculum
from lesson_planner.agents.nodes.objectives import COMPETENCIES_KEY, OBJECTIVES_KEY
from lesson_planner.agents.pipeline_graphs import TRANSITIONS, Transition, build_transition_graph
from lesson_planner.agents.prompts import REFLECTION_QUESTIONS
from lesson_planner.agents.state import PipelineDeps, PipelineState
from lesson_planner.agents.utils.generation import generate_json, require_fields
from lesson_planner.agents.utils.retry_wrapper import RetryPolicy
from lesson_planner.config import settings
from lesson_planner.core.exceptions import SessionNotFound, StageNotReady

logger = logging.getLogger(__name__)

HEALTH_CHECK_SUBJECT = "วิทยาศาสตร์"


def _mode_for_stage(stage: str) -> str | None:
    """Pipeline mode implied by a stage key; None when both tables offer it."""
    if stage.startswith("legacy-"):
        return "legacy"
    if stage in ("0", "1"):
        return "combined"
    return None


def curriculum_view(session: Session) -> dict[str, Any]:
    return {
        "กลุ่มสาระการเรียนรู้": session.learning_area,
        "มาตรฐาน": session.standard,
        "ตัวชี้วัดระหว่างทาง": session.interim_indicators,
        "ตัวชี้วัดปลายทาง": session.final_indicators,
        "สาระการเรียนรู้": session.content,
        "สาระสำคัญ": session.key_content,
    }


def lesson_view(session: Session) -> dict[str, Any]:
    return {
        "response": session.lesson_plan,
        "teachingMaterials": session.teaching_materials,
        "enhancedData": session.enhanced_data,
        "searchMetadata": session.search_metadata,
        "timing": session.timing,
    }


class LessonPipelineOrchestrator:
    def __init__(self, deps: PipelineDeps):
        self.deps = deps
        self._graphs: dict[tuple[str, str], Any] = {}

    def _graph_for(self, mode: str, transition: Transition):
        key = (mode, transition.key)
        if key not in self._graphs:
            self._graphs[key] = build_transition_graph(transition, self.deps)
        return self._graphs[key]

    async def _load_owned(self, user_id: str, session_id: str) -> Session:
        """
        Load a session and verify the caller owns it.

        Raises:
            SessionNotFound: Session is absent or belongs to another user
        """
        session = await self.deps.store.get(session_id)
        if session is None:
            logger.warning(f"⚠️  Session {session_id} not found")
            raise SessionNotFound("Session not found or unauthorized")
        if session.user_id != user_id:
            logger.warning(f"⚠️  User {user_id} attempted to access session {session_id}")
            raise SessionNotFound("Session not found or unauthorized")
        return session

    # ===== ENTRY POINT =====

    async def run_stage(self, user_id: str, request: StageRequest) -> dict[str, Any]:
        """
        Execute one stage request for a user.

        Returns:
            {sessionId, stage, configStep, status, responses} for session stages,
            {stage, results, summary} for batch
        """
        start_time = time.time()
        logger.info(f"🚀 Stage {request.stage} requested by user {user_id}")

        try:
            match request:
                case BatchStageRequest():
                    result = await self.run_batch(request)
                case ReflectionRequest():
                    result = await self.reflect(user_id, request)
                case CurriculumStageRequest() | LegacyCurriculumRequest():
                    result = await self._run_curriculum_stage(user_id, request)
                case _:
                    result = await self._run_session_stage(user_id, request)
        except Exception as e:
            logger.error(f"❌ Stage {request.stage} failed after {time.time() - start_time:.2f}s: {e}")
            raise

        logger.info(f"✅ Stage {request.stage} completed in {time.time() - start_time:.2f}s")
        return result

    async def _run_curriculum_stage(
        self, user_id: str, request: CurriculumStageRequest | LegacyCurriculumRequest
    ) -> dict[str, Any]:
        mode = _mode_for_stage(request.stage)

        if request.session_id:
            session = await self._load_owned(user_id, request.session_id)
            is_new = False
        else:
            # Written by the first save node, so a failed lookup leaves nothing behind
            session = Session(id=str(uuid.uuid4()), user_id=user_id, pipeline_mode=mode)
            is_new = True

        state: PipelineState = {
            "subject": request.subject,
            "lesson_topic": request.lesson_topic,
            "level": request.level,
        }
        return await self._execute(user_id, request.stage, session, is_new, state)

    async def _run_session_stage(self, user_id: str, request: StageRequest) -> dict[str, Any]:
        session = await self._load_owned(user_id, request.session_id)

        state: PipelineState = {}
        if isinstance(request, LessonInputs):
            state["lesson_inputs"] = LessonInputs(
                num_students=request.num_students,
                student_type=request.student_type,
                study_period=request.study_period,
            )
        return await self._execute(user_id, request.stage, session, False, state)

    def _transition_for(self, stage: str, session: Session) -> Transition:
        expected_mode = _mode_for_stage(stage)
        if expected_mode is not None and expected_mode != session.pipeline_mode:
            raise StageNotReady(stage, f"session uses the {session.pipeline_mode} pipeline")

        transition = TRANSITIONS[session.pipeline_mode].get(stage)
        if transition is None:
            raise StageNotReady(stage, f"not available in the {session.pipeline_mode} pipeline")

        if session.config_step < transition.min_step:
            raise StageNotReady(
                stage, f"configStep is {session.config_step}, needs at least {transition.min_step}"
            )
        if transition.before_terminal and session.config_step >= session.terminal_step:
            raise StageNotReady(stage, "lesson plan is already complete")
        require_fields(stage, session, transition.requires)
        return transition

    async def _execute(
        self,
        user_id: str,
        stage: str,
        session: Session,
        is_new: bool,
        state: PipelineState,
    ) -> dict[str, Any]:
        transition = self._transition_for(stage, session)
        graph = self._graph_for(session.pipeline_mode, transition)

        logger.info(
            f"   Session {session.id} ({session.pipeline_mode}) at configStep {session.config_step}: "
            f"{' -> '.join(transition.steps)}"
        )

        initial_state: PipelineState = {
            **state,
            "user_id": user_id,
            "stage": stage,
            "session": session,
            "is_new_session": is_new,
            "advance_to": transition.advance_to,
            "pending": {},
        }
        final_state = await graph.ainvoke(initial_state)
        final_session: Session = final_state["session"]

        return {
            "sessionId": final_session.id,
            "stage": stage,
            "configStep": final_session.config_step,
            "status": final_session.status,
            "responses": {name: final_state.get(key) for name, key in transition.outputs},
        }

    # ===== BATCH =====

    async def run_batch(self, request: BatchStageRequest) -> dict[str, Any]:
        """
        Derive curricula for several subject/topic/level inputs concurrently.
        Each item indexes with its own retriever, and one failing item never
        affects the others. No session is touched.
        """
        logger.info(f"📦 Batch curriculum extraction for {len(request.sessions)} item(s)")

        async def run_item(item: CurriculumQuery) -> dict[str, Any]:
            retriever = self.deps.retriever.fork()
            try:
                return await compute_curriculum(item, dataclasses.replace(self.deps, retriever=retriever))
            finally:
                await retriever.release()

        outcomes = await asyncio.gather(*(run_item(item) for item in request.sessions), return_exceptions=True)

        results = []
        for index, (item, outcome) in enumerate(zip(request.sessions, outcomes)):
            entry: dict[str, Any] = {
                "index": index,
                "subject": item.subject,
                "lessonTopic": item.lesson_topic,
                "level": item.level,
            }
            if isinstance(outcome, Exception):
                logger.warning(f"⚠️  Batch item {index} ({item.subject}) failed: {outcome}")
                entry.update(status="failed", error=str(outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                entry.update(status="success", curriculum=outcome)
            results.append(entry)

        succeeded = sum(1 for entry in results if entry["status"] == "success")
        logger.info(f"📦 Batch finished: {succeeded}/{len(results)} succeeded")
        return {
            "stage": "batch",
            "results": results,
            "summary": {"total": len(results), "succeeded": succeeded, "failed": len(results) - succeeded},
        }

    # ===== REFLECTION =====

    async def reflect(self, user_id: str, request: ReflectionRequest) -> dict[str, Any]:
        """
        Record a teacher's answer to a reflection question on a finished plan,
        together with the model's follow-up insight.

        Raises:
            StageNotReady: The session has not reached its terminal stage
        """
        session = await self._load_owned(user_id, request.session_id)
        if session.status != "completed":
            raise StageNotReady(request.stage, "lesson plan is not complete yet")

        question = REFLECTION_QUESTIONS[request.question_index]
        followup = await generate_json(
            self.deps,
            "reflection-followup",
            {
                "question": question,
                "answer": request.answer,
                "objectives": session.objectives or [],
                "lesson_plan": session.lesson_plan or {},
            },
            required_keys=("insight",),
        )

        entry = {
            "question_index": request.question_index,
            "question": question,
            "answer": request.answer,
            "insight": followup["insight"],
            "suggestions": followup.get("suggestions", []),
            "created_at": datetime.now(UTC).isoformat(),
        }
        await self.deps.store.update(session.id, {"reflections": [*session.reflections, entry]})
        logger.info(f"💭 Stored reflection {request.question_index} for session {session.id}")

        return {
            "sessionId": session.id,
            "stage": request.stage,
            "configStep": session.config_step,
            "status": session.status,
            "responses": {"reflection": entry},
        }

    # ===== READ-ONLY VIEWS =====

    async def get_stage_view(self, user_id: str, session_id: str) -> dict[str, Any]:
        """Assemble the latest stage responses from persisted fields so a client can resume."""
        session = await self._load_owned(user_id, session_id)

        responses: dict[str, Any] = {}
        if session.content is not None:
            responses["curriculum"] = curriculum_view(session)
        if session.objectives is not None:
            responses["objectives"] = {
                OBJECTIVES_KEY: session.objectives,
                COMPETENCIES_KEY: session.key_competencies,
            }
        if session.lesson_plan is not None:
            responses["lessonPlan"] = lesson_view(session)
        if session.evaluation is not None:
            responses["evaluation"] = session.evaluation

        return {
            "sessionId": session.id,
            "pipelineMode": session.pipeline_mode,
            "configStep": session.config_step,
            "status": session.status,
            "responses": responses,
            "reflections": session.reflections,
        }

    async def health_check(self) -> dict[str, Any]:
        """Index the science corpus without any LLM call."""
        timestamp = datetime.now(UTC).isoformat()
        features = {
            "parallelProcessing": True,
            "batchProcessing": True,
            "errorRecovery": True,
            "performanceMonitoring": True,
            "enhancedStep2Agent": True,
            "internetSearch": self.deps.enrichment.search_client.is_configured,
            "udlIntegration": True,
            "inclusiveClassroomSupport": True,
        }

        try:
            index = await self.deps.retriever.index_for_subject(HEALTH_CHECK_SUBJECT)
        except Exception as e:
            logger.error(f"❌ Health check failed: {e}")
            return {"status": "unhealthy", "timestamp": timestamp, "error": str(e), "features": features}

        return {
            "status": "healthy",
            "timestamp": timestamp,
            "curriculum": {"corpusId": index.corpus_id, "passages": index.passage_count},
            "features": features,
        }

    async def aclose(self) -> None:
        await self.deps.gateway.aclose()
        await self.deps.enrichment.search_client.aclose()


# Create singleton orchestrator instance
_orchestrator: LessonPipelineOrchestrator | None = None


def get_orchestrator() -> LessonPipelineOrchestrator:
    """
    Get or create the orchestrator (singleton).
    Collaborators are built from settings on first use.
    """
    global _orchestrator

    if _orchestrator is None:
        from lesson_planner.services.curriculum_retriever import CurriculumRetriever
        from lesson_planner.services.enrichment_agent import EnrichmentAgent
        from lesson_planner.services.llm_gateway import LLMGateway
        from lesson_planner.services.session_store import build_session_store

        logger.info("🔨 Creating lesson pipeline orchestrator (first use)...")
        gateway = LLMGateway()
        deps = PipelineDeps(
            gateway=gateway,
            retriever=CurriculumRetriever(),
            enrichment=EnrichmentAgent(gateway),
            store=build_session_store(),
            retry=RetryPolicy(),
            settings=settings,
        )
        _orchestrator = LessonPipelineOrchestrator(deps)
        logger.info("✅ Orchestrator ready")

    return _orchestrator
