"""
Transition tables and LangGraph builders for the lesson pipeline.

A session's pipeline_mode selects one table for its whole life:
- combined: "0" curriculum + objectives, "1" activities + evaluation
- legacy:   "legacy-0" .. "legacy-3", one artefact per stage
Both tables also offer "parallel-1-2".
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from langgraph.graph import END, StateGraph

from lesson_planner.agents.nodes import NODES
from lesson_planner.agents.state import PipelineDeps, PipelineState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    key: str
    min_step: int                       # cursor must be at least this
    requires: tuple[str, ...]           # session fields that must be populated
    steps: tuple[str, ...]              # node names, run in order
    advance_to: int                     # cursor value after the final save
    outputs: tuple[tuple[str, str], ...]  # (response key, state key)
    before_terminal: bool = False       # refused once the session is completed


COMBINED_TRANSITIONS: dict[str, Transition] = {
    "0": Transition(
        key="0",
        min_step=0,
        requires=(),
        steps=(
            "retrieve_curriculum",
            "generate_curriculum",
            "save_progress",
            "generate_objectives",
            "save_and_advance",
        ),
        advance_to=1,
        outputs=(("curriculum", "curriculum"), ("objectives", "objectives_result")),
    ),
    "1": Transition(
        key="1",
        min_step=1,
        requires=("content",),
        steps=(
            "enrich_lesson",
            "design_activities",
            "save_progress",
            "generate_evaluation",
            "save_and_advance",
        ),
        advance_to=2,
        outputs=(("lessonPlan", "lesson_result"), ("evaluation", "evaluation")),
    ),
    "parallel-1-2": Transition(
        key="parallel-1-2",
        min_step=0,
        requires=("content",),
        steps=("objectives_and_activities", "save_and_advance"),
        advance_to=1,
        outputs=(("objectives", "objectives_result"), ("lessonPlan", "lesson_result")),
        before_terminal=True,
    ),
}

LEGACY_TRANSITIONS: dict[str, Transition] = {
    "legacy-0": Transition(
        key="legacy-0",
        min_step=0,
        requires=(),
        steps=("retrieve_curriculum", "generate_curriculum", "save_and_advance"),
        advance_to=1,
        outputs=(("curriculum", "curriculum"),),
    ),
    "legacy-1": Transition(
        key="legacy-1",
        min_step=1,
        requires=("content",),
        steps=("generate_objectives", "save_and_advance"),
        advance_to=2,
        outputs=(("objectives", "objectives_result"),),
    ),
    "legacy-2": Transition(
        key="legacy-2",
        min_step=2,
        requires=("content",),
        steps=("enrich_lesson", "design_activities", "save_and_advance"),
        advance_to=3,
        outputs=(("lessonPlan", "lesson_result"),),
    ),
    "legacy-3": Transition(
        key="legacy-3",
        min_step=3,
        requires=("lesson_plan",),
        steps=("generate_evaluation", "save_and_advance"),
        advance_to=4,
        outputs=(("evaluation", "evaluation"),),
    ),
    "parallel-1-2": Transition(
        key="parallel-1-2",
        min_step=1,
        requires=("content",),
        steps=("objectives_and_activities", "save_and_advance"),
        advance_to=3,
        outputs=(("objectives", "objectives_result"), ("lessonPlan", "lesson_result")),
        before_terminal=True,
    ),
}

TRANSITIONS: dict[str, dict[str, Transition]] = {
    "combined": COMBINED_TRANSITIONS,
    "legacy": LEGACY_TRANSITIONS,
}

NodeFunc = Callable[[PipelineState, PipelineDeps], Awaitable[dict[str, Any]]]


def _bind(name: str, node: NodeFunc, deps: PipelineDeps) -> Callable[[PipelineState], Awaitable[dict[str, Any]]]:
    async def run(state: PipelineState) -> dict[str, Any]:
        logger.debug(f"   ▶ {name}")
        return await node(state, deps)

    run.__name__ = name
    return run


def build_transition_graph(transition: Transition, deps: PipelineDeps, nodes: dict[str, NodeFunc] | None = None):
    """
    Build the linear LangGraph for one transition.

    Returns:
        Compiled graph ready for ainvoke
    """
    nodes = nodes or NODES
    workflow = StateGraph(PipelineState)

    for name in transition.steps:
        workflow.add_node(name, _bind(name, nodes[name], deps))

    workflow.set_entry_point(transition.steps[0])
    for current, following in zip(transition.steps, transition.steps[1:]):
        workflow.add_edge(current, following)
    workflow.add_edge(transition.steps[-1], END)

    logger.debug(f"🔨 Built graph for stage {transition.key}: {' -> '.join(transition.steps)}")
    return workflow.compile()
