"""
Prompt templates for the lesson generation pipeline.

Templates live in per-stage modules; the registry composes them by id.
"""

from lesson_planner.agents.prompts.reflection import REFLECTION_QUESTIONS
from lesson_planner.agents.prompts.registry import (
    TEMPLATES,
    ComposedPrompt,
    PromptTemplate,
    get_template,
    render,
)

__all__ = [
    "TEMPLATES",
    "ComposedPrompt",
    "PromptTemplate",
    "REFLECTION_QUESTIONS",
    "get_template",
    "render",
]
