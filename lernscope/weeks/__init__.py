"""Authored week contexts and the registry that serves them."""

from __future__ import annotations

from .loader import PACKAGED_DATA_DIR, load_week_contexts, load_week_files
from .normalize import course_slug, normalize_course, normalize_week, session_id, week_token
from .registry import WeekNotFound, WeekRegistry, WeekSummary, build_registry, get_default_registry

__all__ = [
    "PACKAGED_DATA_DIR",
    "WeekNotFound",
    "WeekRegistry",
    "WeekSummary",
    "build_registry",
    "course_slug",
    "get_default_registry",
    "load_week_contexts",
    "load_week_files",
    "normalize_course",
    "normalize_week",
    "session_id",
    "week_token",
]
