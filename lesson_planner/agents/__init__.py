"""
Lesson plan generation agent module.
This contains the LangGraph pipeline that builds a lesson plan stage by stage.
"""

from lesson_planner.agents.models import (
    EnrichmentBundle,
    LessonInputs,
    Session,
    StageRequest,
    StudentType,
    parse_stage_request,
)
from lesson_planner.agents.state import PipelineDeps, PipelineState

__all__ = [
    # Models
    "EnrichmentBundle",
    "LessonInputs",
    "Session",
    "StageRequest",
    "StudentType",
    "parse_stage_request",
    # State types
    "PipelineDeps",
    "PipelineState",
]
