"""
Pydantic models for sessions, enrichment bundles and stage requests.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

PipelineMode = Literal["combined", "legacy"]

# Cursor value at which each transition table is finished
TERMINAL_STEP: dict[str, int] = {"combined": 2, "legacy": 4}

KEY_COMPETENCIES: dict[str, str] = {
    "5.1": "ความสามารถในการสื่อสาร",
    "5.2": "ความสามารถในการคิด",
    "5.3": "ความสามารถในการแก้ปัญหา",
    "5.4": "ความสามารถในการใช้ทักษะชีวิต",
}


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class StudentType(CamelModel):
    type: str = Field(..., min_length=1)
    percentage: float = Field(..., ge=0, le=100)


class Session(CamelModel):
    id: str
    user_id: str
    pipeline_mode: PipelineMode = "combined"
    config_step: int = Field(default=0, ge=0)

    # Stage 0: curriculum
    subject: str | None = None
    lesson_topic: str | None = None
    level: str | None = None
    learning_area: Any = None
    standard: Any = None
    interim_indicators: Any = None
    final_indicators: Any = None
    content: Any = None
    key_content: Any = None

    # Stage 0 (combined) / legacy 1: objectives
    objectives: Any = None
    key_competencies: dict[str, str] | None = None

    # Stage 1 (combined) / legacy 2-3: activities and evaluation
    num_students: int | None = None
    study_period: int | None = None
    student_type: list[StudentType] = Field(default_factory=list)
    lesson_plan: Any = None
    teaching_materials: Any = None
    enhanced_data: Any = None
    search_metadata: dict[str, Any] | None = None
    timing: dict[str, Any] | None = None
    evaluation: Any = None

    reflections: list[dict[str, Any]] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def terminal_step(self) -> int:
        return TERMINAL_STEP[self.pipeline_mode]

    @property
    def status(self) -> str:
        return "completed" if self.config_step >= self.terminal_step else "in_progress"


SESSION_FIELDS = frozenset(Session.model_fields)


class EnrichmentBundle(CamelModel):
    teaching_process_examples: list[str] = Field(..., min_length=1)
    lesson_details: str = Field(..., min_length=1)
    udl_strategies: list[str] = Field(..., min_length=1)
    inclusive_strategies: list[str] = Field(..., min_length=1)
    # category -> "search" | "reasoning" | "fallback"
    source: dict[str, str] = Field(default_factory=dict)

    @property
    def search_performed(self) -> bool:
        return "search" in self.source.values()


# ============================================
# Stage requests (tagged union on "stage")
# ============================================


class CurriculumQuery(CamelModel):
    subject: str = Field(..., min_length=1)
    lesson_topic: str = Field(..., min_length=1)
    level: str = ""


class LessonInputs(CamelModel):
    num_students: int = Field(default=30, gt=0)
    student_type: list[StudentType] = Field(default_factory=list)
    study_period: int = Field(default=9, gt=0)

    @property
    def total_minutes(self) -> int:
        return 50 * self.study_period


class CurriculumStageRequest(CurriculumQuery):
    stage: Literal["0"]
    session_id: str | None = None


class LessonStageRequest(LessonInputs):
    stage: Literal["1"]
    session_id: str


class ParallelStageRequest(LessonInputs):
    stage: Literal["parallel-1-2"]
    session_id: str


class BatchStageRequest(CamelModel):
    stage: Literal["batch"]
    sessions: list[CurriculumQuery] = Field(..., min_length=1)


class LegacyCurriculumRequest(CurriculumQuery):
    stage: Literal["legacy-0"]
    session_id: str | None = None


class LegacyObjectivesRequest(CamelModel):
    stage: Literal["legacy-1"]
    session_id: str


class LegacyActivitiesRequest(LessonInputs):
    stage: Literal["legacy-2"]
    session_id: str


class LegacyEvaluationRequest(CamelModel):
    stage: Literal["legacy-3"]
    session_id: str


class ReflectionRequest(CamelModel):
    stage: Literal["reflect"]
    session_id: str
    question_index: int = Field(..., ge=1, le=5)
    answer: str = Field(..., min_length=1)


StageRequest = Annotated[
    Union[
        CurriculumStageRequest,
        LessonStageRequest,
        ParallelStageRequest,
        BatchStageRequest,
        LegacyCurriculumRequest,
        LegacyObjectivesRequest,
        LegacyActivitiesRequest,
        LegacyEvaluationRequest,
        ReflectionRequest,
    ],
    Field(discriminator="stage"),
]

STAGE_REQUEST_ADAPTER: TypeAdapter[StageRequest] = TypeAdapter(StageRequest)

STAGE_KEYS = ("0", "1", "parallel-1-2", "batch", "legacy-0", "legacy-1", "legacy-2", "legacy-3", "reflect")


def parse_stage_request(stage_key: str, payload: dict[str, Any]) -> StageRequest:
    """Build a typed stage request from a URL stage key and a JSON body."""
    return STAGE_REQUEST_ADAPTER.validate_python({**payload, "stage": stage_key})
