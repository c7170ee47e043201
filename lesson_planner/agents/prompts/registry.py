"""
Prompt template registry.

Maps a template id to its system instruction, user template, expected
response format and default temperature, and composes prompts from
variable bindings. Composition is pure: no I/O, no truncation.
"""

import json
import string
from dataclasses import dataclass, field
from typing import Any, Mapping

from lesson_planner.agents.prompts.activities import ACTIVITY_DESIGN_PROMPT, ACTIVITY_SYSTEM_PROMPT
from lesson_planner.agents.prompts.curriculum import (
    CONTENT_SYSTEM_PROMPT,
    CURRICULUM_CONTENT_PROMPT,
    CURRICULUM_QUERY_PROMPT,
    CURRICULUM_SYSTEM_PROMPT,
)
from lesson_planner.agents.prompts.enrichment import (
    LESSON_DETAILS_PROMPT,
    LESSON_DETAILS_REASONING_PROMPT,
    LESSON_DETAILS_SYSTEM_PROMPT,
    STRATEGIES_PROMPT,
    STRATEGIES_REASONING_PROMPT,
    STRATEGIES_SYSTEM_PROMPT,
    TEACHING_PROCESS_PROMPT,
    TEACHING_PROCESS_REASONING_PROMPT,
    TEACHING_PROCESS_SYSTEM_PROMPT,
)
from lesson_planner.agents.prompts.evaluation import EVALUATION_DESIGN_PROMPT, EVALUATION_SYSTEM_PROMPT
from lesson_planner.agents.prompts.objectives import OBJECTIVES_PROMPT, OBJECTIVES_SYSTEM_PROMPT
from lesson_planner.agents.prompts.reflection import REFLECTION_FOLLOWUP_PROMPT, REFLECTION_SYSTEM_PROMPT
from lesson_planner.config import settings
from lesson_planner.core.exceptions import MissingVariable

_formatter = string.Formatter()


@dataclass(frozen=True)
class PromptTemplate:
    template_id: str
    system: str
    user: str
    response_format: str = "json"
    temperature_setting: str = "curriculum_temperature"
    variables: frozenset[str] = field(init=False, default=frozenset())

    def __post_init__(self):
        names = {name for _text, name, _spec, _conv in _formatter.parse(self.user) if name}
        object.__setattr__(self, "variables", frozenset(names))


@dataclass(frozen=True)
class ComposedPrompt:
    template_id: str
    system: str
    user: str
    response_format: str
    temperature: float


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


TEMPLATES: dict[str, PromptTemplate] = {
    t.template_id: t
    for t in (
        PromptTemplate("curriculum-query", CURRICULUM_SYSTEM_PROMPT, CURRICULUM_QUERY_PROMPT),
        PromptTemplate("curriculum-content", CONTENT_SYSTEM_PROMPT, CURRICULUM_CONTENT_PROMPT),
        PromptTemplate(
            "objectives", OBJECTIVES_SYSTEM_PROMPT, OBJECTIVES_PROMPT,
            temperature_setting="objectives_temperature",
        ),
        PromptTemplate(
            "activity-design", ACTIVITY_SYSTEM_PROMPT, ACTIVITY_DESIGN_PROMPT,
            temperature_setting="activity_temperature",
        ),
        PromptTemplate(
            "evaluation-design", EVALUATION_SYSTEM_PROMPT, EVALUATION_DESIGN_PROMPT,
            temperature_setting="evaluation_temperature",
        ),
        PromptTemplate(
            "reflection-followup", REFLECTION_SYSTEM_PROMPT, REFLECTION_FOLLOWUP_PROMPT,
            temperature_setting="reflection_temperature",
        ),
        PromptTemplate(
            "enrichment-teaching-process", TEACHING_PROCESS_SYSTEM_PROMPT, TEACHING_PROCESS_PROMPT,
            temperature_setting="enrichment_temperature",
        ),
        PromptTemplate(
            "enrichment-teaching-process-reasoning", TEACHING_PROCESS_SYSTEM_PROMPT,
            TEACHING_PROCESS_REASONING_PROMPT, temperature_setting="enrichment_temperature",
        ),
        PromptTemplate(
            "enrichment-strategies", STRATEGIES_SYSTEM_PROMPT, STRATEGIES_PROMPT,
            temperature_setting="enrichment_temperature",
        ),
        PromptTemplate(
            "enrichment-strategies-reasoning", STRATEGIES_SYSTEM_PROMPT, STRATEGIES_REASONING_PROMPT,
            temperature_setting="enrichment_temperature",
        ),
        PromptTemplate(
            "enrichment-lesson-details", LESSON_DETAILS_SYSTEM_PROMPT, LESSON_DETAILS_PROMPT,
            response_format="text", temperature_setting="enrichment_temperature",
        ),
        PromptTemplate(
            "enrichment-lesson-details-reasoning", LESSON_DETAILS_SYSTEM_PROMPT,
            LESSON_DETAILS_REASONING_PROMPT, response_format="text",
            temperature_setting="enrichment_temperature",
        ),
    )
}


def get_template(template_id: str) -> PromptTemplate:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise KeyError(f"Unknown prompt template: {template_id}") from None


def render(
    template_id: str,
    variables: Mapping[str, Any],
    *,
    temperature: float | None = None,
) -> ComposedPrompt:
    """
    Compose a prompt from a registered template.

    Every declared placeholder must be bound (None counts as unbound).
    Lists and dicts are interpolated as JSON in full.

    Raises:
        MissingVariable: If any declared placeholder lacks a binding
        KeyError: If the template id is unknown
    """
    template = get_template(template_id)

    missing = sorted(name for name in template.variables if variables.get(name) is None)
    if missing:
        raise MissingVariable(template_id, missing)

    bound = {name: _stringify(variables[name]) for name in template.variables}
    if temperature is None:
        temperature = getattr(settings, template.temperature_setting)

    return ComposedPrompt(
        template_id=template_id,
        system=template.system,
        user=template.user.format(**bound),
        response_format=template.response_format,
        temperature=temperature,
    )
