"""
State and dependencies for the lesson pipeline graphs.
This defines the data that flows through the LangGraph nodes.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypedDict

from lesson_planner.agents.models import EnrichmentBundle, LessonInputs, Session
from lesson_planner.agents.utils.retry_wrapper import RetryPolicy
from lesson_planner.config import Settings
from lesson_planner.services.curriculum_retriever import CurriculumRetriever, RetrievedPassage
from lesson_planner.services.llm_gateway import LLMGateway

if TYPE_CHECKING:
    from lesson_planner.services.enrichment_agent import EnrichmentAgent
    from lesson_planner.services.session_store import SessionStore


@dataclass
class PipelineDeps:
    """Collaborators shared by every node of a pipeline run."""

    gateway: LLMGateway
    retriever: CurriculumRetriever
    enrichment: "EnrichmentAgent"
    store: "SessionStore"
    retry: RetryPolicy
    settings: Settings


class PipelineState(TypedDict, total=False):
    # ===== INPUT =====
    user_id: str
    stage: str
    session: Session              # refreshed after every save
    is_new_session: bool          # not yet written to the store
    advance_to: int               # cursor value once the final save lands
    subject: str
    lesson_topic: str
    level: str
    lesson_inputs: LessonInputs

    # ===== INTERMEDIATE RESULTS =====
    passages: list[RetrievedPassage]
    curriculum: dict[str, Any]            # curriculum lookup + content, as returned to the client
    objectives_result: dict[str, Any]
    enrichment: EnrichmentBundle
    lesson_result: dict[str, Any]
    evaluation: Any

    # ===== PERSISTENCE =====
    pending: dict[str, Any]               # session fields waiting for the next save node
