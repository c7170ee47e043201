"""
One generation sub-step: render a template, call the gateway, extract JSON.
The whole sub-step runs under the orchestrator's retry policy.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from lesson_planner.agents.prompts import render
from lesson_planner.agents.state import PipelineDeps
from lesson_planner.core.exceptions import StageNotReady
from lesson_planner.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)


async def generate_json(
    deps: PipelineDeps,
    template_id: str,
    variables: dict[str, Any],
    *,
    required_keys: Iterable[str] = (),
    parse: Callable[[str], dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Render, complete and extract a JSON object, retrying bad samples.

    Args:
        deps: Pipeline collaborators (gateway and retry policy are used)
        template_id: Registered prompt template id
        variables: Template bindings
        required_keys: Keys the object must carry
        parse: Custom parser for the raw text, replacing the default extraction

    Returns:
        The parsed JSON object
    """
    required_keys = tuple(required_keys)

    async def attempt() -> dict[str, Any]:
        prompt = render(template_id, variables)
        raw = await deps.gateway.complete(
            prompt.system,
            prompt.user,
            prompt.response_format,
            temperature=prompt.temperature,
        )
        if parse is not None:
            return parse(raw)
        return extract_json_object(raw, required_keys)

    return await deps.retry.run(attempt, label=template_id)


def require_fields(stage: str, source: Any, names: Iterable[str]) -> None:
    """Raise StageNotReady unless every named attribute on source is populated."""
    missing = [name for name in names if getattr(source, name, None) in (None, "", [], {})]
    if missing:
        raise StageNotReady(stage, f"missing {', '.join(missing)}")
