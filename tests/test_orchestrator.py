"""
Tests for the lesson pipeline orchestrator: stage flow, gating, ownership,
retry behaviour, batch isolation, reflection and the resume view.
"""

import pytest

from lesson_planner.agents.models import Session, parse_stage_request
from lesson_planner.agents.prompts.activities import ACTIVITY_SYSTEM_PROMPT
from lesson_planner.agents.prompts.curriculum import CONTENT_SYSTEM_PROMPT, CURRICULUM_SYSTEM_PROMPT
from lesson_planner.agents.prompts.evaluation import EVALUATION_SYSTEM_PROMPT
from lesson_planner.agents.prompts.objectives import OBJECTIVES_SYSTEM_PROMPT
from lesson_planner.core.exceptions import (
    CurriculumNotFound,
    GenerationFailed,
    MalformedOutput,
    SessionNotFound,
    StageNotReady,
)

from tests.fakes import (
    ACTIVITY_ANSWER,
    CONTENT_ANSWER,
    CURRICULUM_ANSWER,
    EVALUATION_ANSWER,
    OBJECTIVES_ANSWER,
    as_json,
)

USER = "teacher-1"

CURRICULUM_BODY = {"subject": "วิทยาศาสตร์", "lessonTopic": "เซลล์", "level": "ม.1"}


def curriculum_ready_session(session_id="sess-1", user_id=USER, mode="combined", step=1, **fields):
    data = {
        "subject": "วิทยาศาสตร์",
        "lesson_topic": "เซลล์",
        "level": "ม.1",
        "standard": CURRICULUM_ANSWER["มาตรฐาน"],
        "interim_indicators": CURRICULUM_ANSWER["ตัวชี้วัดระหว่างทาง"],
        "final_indicators": CURRICULUM_ANSWER["ตัวชี้วัดปลายทาง"],
        "content": CONTENT_ANSWER["สาระการเรียนรู้"],
        "key_content": CONTENT_ANSWER["สาระสำคัญ"],
    }
    data.update(fields)
    return Session(id=session_id, user_id=user_id, pipeline_mode=mode, config_step=step, **data)


async def run(orchestrator, stage, body, user_id=USER):
    return await orchestrator.run_stage(user_id, parse_stage_request(stage, body))


class TestCombinedPipeline:
    """Two-stage combined flow"""

    @pytest.mark.asyncio
    async def test_stage0_creates_session_with_curriculum_and_objectives(self, orchestrator, session_store):
        result = await run(orchestrator, "0", CURRICULUM_BODY)

        assert result["stage"] == "0"
        assert result["configStep"] == 1
        assert result["status"] == "in_progress"
        assert set(result["responses"]) == {"curriculum", "objectives"}
        assert result["responses"]["curriculum"]["มาตรฐาน"] == CURRICULUM_ANSWER["มาตรฐาน"]
        assert result["responses"]["curriculum"]["สาระการเรียนรู้"] == CONTENT_ANSWER["สาระการเรียนรู้"]
        assert "found" not in result["responses"]["curriculum"]

        objectives = result["responses"]["objectives"]
        assert objectives["จุดประสงค์การเรียนรู้"] == OBJECTIVES_ANSWER["จุดประสงค์การเรียนรู้"]
        assert set(objectives["สมรรถนะผู้เรียน"]) == {"5.1", "5.2", "5.3", "5.4"}

        session = await session_store.get(result["sessionId"])
        assert session.user_id == USER
        assert session.config_step == 1
        assert session.pipeline_mode == "combined"
        assert session.content == CONTENT_ANSWER["สาระการเรียนรู้"]
        assert session.learning_area == "วิทยาศาสตร์"
        assert session.objectives == OBJECTIVES_ANSWER["จุดประสงค์การเรียนรู้"]

    @pytest.mark.asyncio
    async def test_full_flow_reaches_terminal_step(self, orchestrator, session_store, fake_enrichment):
        first = await run(orchestrator, "0", CURRICULUM_BODY)

        second = await run(
            orchestrator,
            "1",
            {
                "sessionId": first["sessionId"],
                "numStudents": 25,
                "studyPeriod": 1,
                "studentType": [{"type": "นักเรียนที่มีความบกพร่องทางการเรียนรู้", "percentage": 10}],
            },
        )

        assert second["configStep"] == 2
        assert second["status"] == "completed"
        lesson = second["responses"]["lessonPlan"]
        assert lesson["response"] == ACTIVITY_ANSWER["กิจกรรมการเรียนรู้"]
        assert lesson["teachingMaterials"] == ACTIVITY_ANSWER["สื่อและอุปกรณ์"]
        assert lesson["timing"] == {"expectedMinutes": 50, "plannedMinutes": 50, "balanced": True}
        assert lesson["searchMetadata"]["searchPerformed"] is False
        assert second["responses"]["evaluation"] == EVALUATION_ANSWER

        session = await session_store.get(first["sessionId"])
        assert session.num_students == 25
        assert session.study_period == 1
        assert session.student_type[0].percentage == 10
        assert session.evaluation == EVALUATION_ANSWER
        assert fake_enrichment.calls[0][:3] == ("วิทยาศาสตร์", "เซลล์", "ม.1")

    @pytest.mark.asyncio
    async def test_stage1_defaults_lesson_inputs(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session())

        await run(orchestrator, "1", {"sessionId": "sess-1"})

        session = await session_store.get("sess-1")
        assert session.num_students == 30
        assert session.study_period == 9
        assert session.timing["expectedMinutes"] == 450
        assert session.timing["balanced"] is False

    @pytest.mark.asyncio
    async def test_parallel_stage_persists_objectives_and_lesson(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session(step=0))

        result = await run(orchestrator, "parallel-1-2", {"sessionId": "sess-1", "studyPeriod": 1})

        assert result["configStep"] == 1
        assert set(result["responses"]) == {"objectives", "lessonPlan"}
        session = await session_store.get("sess-1")
        assert session.objectives == OBJECTIVES_ANSWER["จุดประสงค์การเรียนรู้"]
        assert session.lesson_plan == ACTIVITY_ANSWER["กิจกรรมการเรียนรู้"]


class TestStageGating:
    """Cursor and prerequisite checks"""

    @pytest.mark.asyncio
    async def test_stage1_before_stage0_is_not_ready(self, orchestrator, session_store, scripted_gateway):
        await session_store.create(Session(id="sess-1", user_id=USER))

        with pytest.raises(StageNotReady):
            await run(orchestrator, "1", {"sessionId": "sess-1"})

        session = await session_store.get("sess-1")
        assert session.config_step == 0
        assert session.lesson_plan is None
        assert scripted_gateway.calls == []

    @pytest.mark.asyncio
    async def test_missing_content_is_not_ready(self, orchestrator, session_store):
        await session_store.create(Session(id="sess-1", user_id=USER, config_step=1))

        with pytest.raises(StageNotReady, match="content"):
            await run(orchestrator, "1", {"sessionId": "sess-1"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,step", [("combined", 2), ("legacy", 4)])
    async def test_parallel_on_completed_session_is_not_ready(
        self, orchestrator, session_store, scripted_gateway, mode, step
    ):
        await session_store.create(
            curriculum_ready_session(mode=mode, step=step, lesson_plan={"เดิม (50 นาที)": "x"}, evaluation={"rubric": 1})
        )

        with pytest.raises(StageNotReady, match="already complete"):
            await run(orchestrator, "parallel-1-2", {"sessionId": "sess-1"})

        session = await session_store.get("sess-1")
        assert session.lesson_plan == {"เดิม (50 นาที)": "x"}
        assert session.evaluation == {"rubric": 1}
        assert scripted_gateway.calls == []

    @pytest.mark.asyncio
    async def test_legacy_stage_on_combined_session_is_rejected(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session())

        with pytest.raises(StageNotReady, match="combined"):
            await run(orchestrator, "legacy-1", {"sessionId": "sess-1"})

    @pytest.mark.asyncio
    async def test_failure_midway_keeps_persisted_fields(self, orchestrator, session_store, scripted_gateway):
        scripted_gateway.responses[OBJECTIVES_SYSTEM_PROMPT].clear()
        scripted_gateway.script(OBJECTIVES_SYSTEM_PROMPT, GenerationFailed("provider down", status_code=503))

        with pytest.raises(GenerationFailed):
            await run(orchestrator, "0", CURRICULUM_BODY)

        sessions = list(session_store._documents.values())
        assert len(sessions) == 1
        assert sessions[0]["config_step"] == 0
        assert sessions[0]["content"] == CONTENT_ANSWER["สาระการเรียนรู้"]
        assert sessions[0]["objectives"] is None


class TestOwnership:
    """Session access control"""

    @pytest.mark.asyncio
    async def test_foreign_session_is_reported_as_not_found(self, orchestrator, session_store, scripted_gateway):
        await session_store.create(curriculum_ready_session(user_id="someone-else"))

        with pytest.raises(SessionNotFound):
            await run(orchestrator, "1", {"sessionId": "sess-1"})

        session = await session_store.get("sess-1")
        assert session.config_step == 1
        assert session.lesson_plan is None
        assert scripted_gateway.calls == []

    @pytest.mark.asyncio
    async def test_absent_session_raises_session_not_found(self, orchestrator):
        with pytest.raises(SessionNotFound):
            await run(orchestrator, "legacy-3", {"sessionId": "missing"})

    @pytest.mark.asyncio
    async def test_stage_view_checks_owner(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session(user_id="someone-else"))

        with pytest.raises(SessionNotFound):
            await orchestrator.get_stage_view(USER, "sess-1")


class TestCurriculumLookup:
    """Not-found handling and retries"""

    @pytest.mark.asyncio
    async def test_found_false_raises_and_writes_nothing(self, orchestrator, session_store, scripted_gateway):
        scripted_gateway.responses[CURRICULUM_SYSTEM_PROMPT].clear()
        scripted_gateway.script(CURRICULUM_SYSTEM_PROMPT, as_json({"found": False, "reason": "ไม่มีเรื่องนี้"}))

        with pytest.raises(CurriculumNotFound):
            await run(orchestrator, "0", CURRICULUM_BODY)

        assert session_store._documents == {}
        assert len(scripted_gateway.calls_for(CURRICULUM_SYSTEM_PROMPT)) == 1

    @pytest.mark.asyncio
    async def test_not_found_marker_without_json(self, orchestrator, scripted_gateway):
        scripted_gateway.responses[CURRICULUM_SYSTEM_PROMPT].clear()
        scripted_gateway.script(CURRICULUM_SYSTEM_PROMPT, "ไม่พบข้อมูลหลักสูตรที่ตรงกับเรื่องนี้")

        with pytest.raises(CurriculumNotFound):
            await run(orchestrator, "0", CURRICULUM_BODY)

    @pytest.mark.asyncio
    async def test_malformed_output_is_retried_up_to_max_attempts(self, orchestrator, session_store, scripted_gateway):
        scripted_gateway.responses[CURRICULUM_SYSTEM_PROMPT].clear()
        scripted_gateway.script(CURRICULUM_SYSTEM_PROMPT, "ขออภัย ไม่สามารถตอบเป็นรูปแบบที่กำหนดได้")

        with pytest.raises(MalformedOutput):
            await run(orchestrator, "0", CURRICULUM_BODY)

        assert len(scripted_gateway.calls_for(CURRICULUM_SYSTEM_PROMPT)) == 3
        assert session_store._documents == {}

    @pytest.mark.asyncio
    async def test_transient_failure_recovers(self, orchestrator, scripted_gateway):
        scripted_gateway.responses[CONTENT_SYSTEM_PROMPT].clear()
        scripted_gateway.script(
            CONTENT_SYSTEM_PROMPT,
            GenerationFailed("rate limited", status_code=429),
            as_json(CONTENT_ANSWER),
        )

        result = await run(orchestrator, "0", CURRICULUM_BODY)

        assert result["configStep"] == 1
        assert len(scripted_gateway.calls_for(CONTENT_SYSTEM_PROMPT)) == 2


class TestLegacyPipeline:
    """Four-stage legacy flow"""

    @pytest.mark.asyncio
    async def test_legacy_stages_advance_one_at_a_time(self, orchestrator, session_store):
        first = await run(orchestrator, "legacy-0", CURRICULUM_BODY)
        session_id = first["sessionId"]
        assert first["configStep"] == 1
        assert set(first["responses"]) == {"curriculum"}

        second = await run(orchestrator, "legacy-1", {"sessionId": session_id})
        assert second["configStep"] == 2
        assert set(second["responses"]) == {"objectives"}

        third = await run(orchestrator, "legacy-2", {"sessionId": session_id, "studyPeriod": 1})
        assert third["configStep"] == 3
        assert set(third["responses"]) == {"lessonPlan"}

        fourth = await run(orchestrator, "legacy-3", {"sessionId": session_id})
        assert fourth["configStep"] == 4
        assert fourth["status"] == "completed"
        assert fourth["responses"]["evaluation"] == EVALUATION_ANSWER

        session = await session_store.get(session_id)
        assert session.pipeline_mode == "legacy"

    @pytest.mark.asyncio
    async def test_legacy_evaluation_requires_lesson_plan(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session(mode="legacy", step=3))

        with pytest.raises(StageNotReady, match="lesson_plan"):
            await run(orchestrator, "legacy-3", {"sessionId": "sess-1"})

    @pytest.mark.asyncio
    async def test_legacy_parallel_advances_to_evaluation(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session(mode="legacy", step=1))

        result = await run(orchestrator, "parallel-1-2", {"sessionId": "sess-1"})

        assert result["configStep"] == 3


class TestBatch:
    """Batch curriculum extraction"""

    @pytest.mark.asyncio
    async def test_failing_item_does_not_affect_others(self, orchestrator, session_store):
        result = await run(
            orchestrator,
            "batch",
            {
                "sessions": [
                    {"subject": "วิทยาศาสตร์", "lessonTopic": "เซลล์", "level": "ม.1"},
                    {"subject": "ฟิสิกส์ควอนตัมประยุกต์", "lessonTopic": "สปิน", "level": "ม.6"},
                ]
            },
        )

        first, second = result["results"]
        assert first["index"] == 0
        assert first["status"] == "success"
        assert first["curriculum"]["มาตรฐาน"] == CURRICULUM_ANSWER["มาตรฐาน"]
        assert second["index"] == 1
        assert second["status"] == "failed"
        assert "curriculum.csv" in second["error"]
        assert result["summary"] == {"total": 2, "succeeded": 1, "failed": 1}
        assert session_store._documents == {}
        # each item indexed with its own retriever
        assert orchestrator.deps.retriever._indexes == {}

    @pytest.mark.asyncio
    async def test_repeated_batches_leave_no_collections_behind(self, orchestrator):
        client = orchestrator.deps.retriever.client
        before = len(client.get_collections().collections)

        for _ in range(3):
            result = await run(
                orchestrator, "batch", {"sessions": [{"subject": "วิทยาศาสตร์", "lessonTopic": "เซลล์", "level": "ม.1"}]}
            )
            assert result["summary"]["succeeded"] == 1

        assert len(client.get_collections().collections) == before


class TestReflection:
    """Post-completion reflection"""

    @pytest.mark.asyncio
    async def test_reflection_is_appended(self, orchestrator, session_store):
        await session_store.create(
            curriculum_ready_session(step=2, objectives={"K": ["x"]}, lesson_plan={"a (50 นาที)": "b"})
        )

        result = await run(orchestrator, "reflect", {"sessionId": "sess-1", "questionIndex": 5, "answer": "เวลาไม่พอ"})

        reflection = result["responses"]["reflection"]
        assert reflection["question_index"] == 5
        assert reflection["insight"] == "กิจกรรมเหมาะกับนักเรียนส่วนใหญ่"
        session = await session_store.get("sess-1")
        assert len(session.reflections) == 1
        assert session.reflections[0]["answer"] == "เวลาไม่พอ"

    @pytest.mark.asyncio
    async def test_reflection_requires_completed_session(self, orchestrator, session_store):
        await session_store.create(curriculum_ready_session(step=1))

        with pytest.raises(StageNotReady):
            await run(orchestrator, "reflect", {"sessionId": "sess-1", "questionIndex": 1, "answer": "ดี"})


class TestViewsAndHealth:
    @pytest.mark.asyncio
    async def test_stage_view_assembles_persisted_responses(self, orchestrator):
        first = await run(orchestrator, "0", CURRICULUM_BODY)

        view = await orchestrator.get_stage_view(USER, first["sessionId"])

        assert view["configStep"] == 1
        assert view["status"] == "in_progress"
        assert view["responses"]["curriculum"]["สาระสำคัญ"] == CONTENT_ANSWER["สาระสำคัญ"]
        assert "objectives" in view["responses"]
        assert "lessonPlan" not in view["responses"]

    @pytest.mark.asyncio
    async def test_health_check_indexes_science_corpus(self, orchestrator, scripted_gateway):
        report = await orchestrator.health_check()

        assert report["status"] == "healthy"
        assert report["curriculum"]["corpusId"] == "science.csv"
        assert report["features"]["batchProcessing"] is True
        assert report["features"]["internetSearch"] is False
        assert scripted_gateway.calls == []

    @pytest.mark.asyncio
    async def test_health_check_reports_missing_corpus(self, orchestrator, corpus_dir):
        (corpus_dir / "science.csv").unlink()

        report = await orchestrator.health_check()

        assert report["status"] == "unhealthy"
        assert "science.csv" in report["error"]


@pytest.mark.asyncio
async def test_activity_prompt_receives_total_minutes(orchestrator, session_store, scripted_gateway):
    await session_store.create(curriculum_ready_session())

    await run(orchestrator, "1", {"sessionId": "sess-1", "studyPeriod": 2})

    prompt = scripted_gateway.calls_for(ACTIVITY_SYSTEM_PROMPT)[0]["prompt"]
    assert "100" in prompt
    assert scripted_gateway.calls_for(EVALUATION_SYSTEM_PROMPT)
