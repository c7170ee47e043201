"""
LangGraph node implementations for the lesson pipeline.

Each node takes (state, deps) and returns a partial state update.
"""

from lesson_planner.agents.nodes.activities import design_activities, enrich_lesson, objectives_and_activities
from lesson_planner.agents.nodes.curriculum import generate_curriculum, retrieve_curriculum
from lesson_planner.agents.nodes.evaluation import generate_evaluation
from lesson_planner.agents.nodes.objectives import generate_objectives
from lesson_planner.agents.nodes.save_to_db import save_and_advance, save_progress

NODES = {
    "retrieve_curriculum": retrieve_curriculum,
    "generate_curriculum": generate_curriculum,
    "generate_objectives": generate_objectives,
    "enrich_lesson": enrich_lesson,
    "design_activities": design_activities,
    "objectives_and_activities": objectives_and_activities,
    "generate_evaluation": generate_evaluation,
    "save_progress": save_progress,
    "save_and_advance": save_and_advance,
}

__all__ = ["NODES"]
