"""
Pytest configuration and shared fixtures
"""
import pytest
from qdrant_client import QdrantClient

from lesson_planner.agents.orchestrator import LessonPipelineOrchestrator
from lesson_planner.agents.prompts.activities import ACTIVITY_SYSTEM_PROMPT
from lesson_planner.agents.prompts.curriculum import CONTENT_SYSTEM_PROMPT, CURRICULUM_SYSTEM_PROMPT
from lesson_planner.agents.prompts.evaluation import EVALUATION_SYSTEM_PROMPT
from lesson_planner.agents.prompts.objectives import OBJECTIVES_SYSTEM_PROMPT
from lesson_planner.agents.prompts.reflection import REFLECTION_SYSTEM_PROMPT
from lesson_planner.agents.state import PipelineDeps
from lesson_planner.agents.utils.retry_wrapper import RetryPolicy
from lesson_planner.config import settings
from lesson_planner.services.curriculum_retriever import CurriculumRetriever
from lesson_planner.services.session_store import InMemorySessionStore

from tests.fakes import (
    ACTIVITY_ANSWER,
    CONTENT_ANSWER,
    CORPUS_HEADER,
    CURRICULUM_ANSWER,
    EVALUATION_ANSWER,
    OBJECTIVES_ANSWER,
    REFLECTION_ANSWER,
    SCIENCE_ROWS,
    FakeEnrichment,
    FakeGateway,
    HashEmbedder,
    as_json,
    no_sleep,
)


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset singleton clients before each test"""
    import lesson_planner.core.supabase_client
    monkeypatch.setattr(lesson_planner.core.supabase_client, "_supabase_client", None)

    import lesson_planner.core.qdrant_client
    monkeypatch.setattr(lesson_planner.core.qdrant_client, "_qdrant_client", None)

    import lesson_planner.agents.orchestrator
    monkeypatch.setattr(lesson_planner.agents.orchestrator, "_orchestrator", None)


@pytest.fixture
def corpus_dir(tmp_path):
    """Curriculum directory with a science corpus and no general corpus."""
    (tmp_path / "science.csv").write_text(CORPUS_HEADER + SCIENCE_ROWS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def embedder():
    return HashEmbedder()


@pytest.fixture
def retriever(corpus_dir, embedder):
    return CurriculumRetriever(embedder=embedder, client=QdrantClient(location=":memory:"), data_dir=corpus_dir)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def scripted_gateway(fake_gateway):
    """Gateway answering every stage with a well-formed payload."""
    fake_gateway.script(CURRICULUM_SYSTEM_PROMPT, as_json(CURRICULUM_ANSWER))
    fake_gateway.script(CONTENT_SYSTEM_PROMPT, as_json(CONTENT_ANSWER))
    fake_gateway.script(OBJECTIVES_SYSTEM_PROMPT, "```json\n" + as_json(OBJECTIVES_ANSWER) + "\n```")
    fake_gateway.script(ACTIVITY_SYSTEM_PROMPT, "นี่คือแผนกิจกรรม\n" + as_json(ACTIVITY_ANSWER))
    fake_gateway.script(EVALUATION_SYSTEM_PROMPT, as_json(EVALUATION_ANSWER))
    fake_gateway.script(REFLECTION_SYSTEM_PROMPT, as_json(REFLECTION_ANSWER))
    return fake_gateway


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def retry_policy():
    return RetryPolicy(max_attempts=3, base_delay=0.0, sleep=no_sleep)


@pytest.fixture
def fake_enrichment():
    return FakeEnrichment()


@pytest.fixture
def pipeline_deps(scripted_gateway, retriever, fake_enrichment, session_store, retry_policy):
    return PipelineDeps(
        gateway=scripted_gateway,
        retriever=retriever,
        enrichment=fake_enrichment,
        store=session_store,
        retry=retry_policy,
        settings=settings,
    )


@pytest.fixture
def orchestrator(pipeline_deps):
    return LessonPipelineOrchestrator(pipeline_deps)
