"""
Typed errors raised by the lesson generation pipeline.

Leaf components raise these unmodified; the orchestrator decides whether to
retry, and the API layer maps them to HTTP responses.
"""

from typing import Any

# ============================================
# Exception Hierarchy
# ============================================


class LessonPipelineError(Exception):
    """Base exception for lesson pipeline failures."""

    pass


class CurriculumNotFound(LessonPipelineError):
    """No reference curriculum matches the requested subject/topic/level."""

    def __init__(self, message: str = "ไม่พบข้อมูลหลักสูตร กรุณาลองใหม่", **context: Any):
        super().__init__(message)
        self.context = context


class CorpusUnavailable(CurriculumNotFound):
    """The curriculum corpus file is missing, unreadable, or empty."""

    def __init__(self, corpus_id: str, reason: str):
        super().__init__(f"Curriculum corpus '{corpus_id}' unavailable: {reason}", corpus_id=corpus_id)
        self.corpus_id = corpus_id
        self.reason = reason


class MissingVariable(LessonPipelineError):
    """A prompt template placeholder has no binding."""

    def __init__(self, template_id: str, names: list[str]):
        super().__init__(f"Template '{template_id}' is missing variables: {', '.join(names)}")
        self.template_id = template_id
        self.names = names


class MalformedOutput(LessonPipelineError):
    """Model output contained no usable JSON payload."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class GenerationFailed(LessonPipelineError):
    """Transport, authentication, rate-limit or provider failure from the LLM gateway."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class Unauthorized(LessonPipelineError):
    """Caller does not own the session, or credentials are invalid."""

    pass


class SessionNotFound(Unauthorized):
    """Session does not exist. Reported to clients exactly like Unauthorized."""

    pass


class StageNotReady(LessonPipelineError):
    """A stage was requested before its prerequisite fields or cursor position exist."""

    def __init__(self, stage: str, reason: str):
        super().__init__(f"Stage '{stage}' is not ready: {reason}")
        self.stage = stage
        self.reason = reason


# Errors that reflect a bad sample or a transient provider fault
RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    GenerationFailed,
    MalformedOutput,
    MissingVariable,
)


def is_retryable(error: BaseException) -> bool:
    """Return True when a generation sub-step may be attempted again after this error."""
    if isinstance(error, (CurriculumNotFound, Unauthorized, StageNotReady)):
        return False
    return isinstance(error, RETRYABLE_ERRORS)
