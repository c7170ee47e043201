"""
Inclusive Lesson Planner
Application package initialization
"""

from lesson_planner.config import settings, get_settings, Settings

__all__ = ["settings", "get_settings", "Settings"]
