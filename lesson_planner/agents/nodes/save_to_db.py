"""
Persistence nodes.

save_progress commits pending fields mid-stage so partial results survive a
later failure. save_and_advance is always a stage's last node and is the only
place the cursor moves.
"""

import logging
from typing import Any

from lesson_planner.agents.state import PipelineDeps, PipelineState

logger = logging.getLogger(__name__)


async def _commit(state: PipelineState, deps: PipelineDeps, fields: dict[str, Any]) -> dict[str, Any]:
    session = state["session"]

    if state.get("is_new_session"):
        await deps.store.create(session)
        logger.info(f"💾 Stored new {session.pipeline_mode} session {session.id}")

    if fields:
        await deps.store.update(session.id, fields)

    refreshed = await deps.store.get(session.id)
    return {"session": refreshed, "pending": {}, "is_new_session": False}


async def save_progress(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    pending = dict(state.get("pending", {}))
    logger.info(f"💾 Saving {len(pending)} field(s) for stage {state['stage']}")
    return await _commit(state, deps, pending)


async def save_and_advance(state: PipelineState, deps: PipelineDeps) -> dict[str, Any]:
    session = state["session"]
    fields = dict(state.get("pending", {}))
    fields["config_step"] = max(session.config_step, state["advance_to"])

    logger.info(
        f"💾 Completing stage {state['stage']}: configStep {session.config_step} -> {fields['config_step']}"
    )
    return await _commit(state, deps, fields)
