"""Course and week identifier normalization.

Course input arrives as the internal level ("A1") or the student-facing
slug ("aleman1", "aleman-1"); week input as a number, a numeric string or
a week token ("w01", "w1"). This module is the only place that reconciles
them.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional

from lernscope.core.topics import CourseLevel

COURSE_ALIASES: Mapping[str, CourseLevel] = MappingProxyType(
    {
        "a1": CourseLevel.A1,
        "aleman1": CourseLevel.A1,
        "aleman-1": CourseLevel.A1,
        "a2": CourseLevel.A2,
        "aleman2": CourseLevel.A2,
        "aleman-2": CourseLevel.A2,
    }
)

COURSE_SLUGS: Mapping[CourseLevel, str] = MappingProxyType(
    {
        CourseLevel.A1: "aleman1",
        CourseLevel.A2: "aleman2",
    }
)

WEEK_TOKEN_RE = re.compile(r"^w(?P<number>\d{1,2})$")
_DIGITS_RE = re.compile(r"^\d{1,3}$")


def normalize_course(value: Any) -> Optional[CourseLevel]:
    """Map a course alias to its CourseLevel, or None when unrecognized."""
    if isinstance(value, CourseLevel):
        return value
    if not isinstance(value, str):
        return None
    return COURSE_ALIASES.get(value.strip().lower())


def normalize_week(value: Any) -> Optional[int]:
    """Parse a week number or token; None when the input is not a week at all.

    Range checks are left to the registry: ``normalize_week(0)`` returns 0.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    match = WEEK_TOKEN_RE.match(text)
    if match:
        return int(match.group("number"))
    if _DIGITS_RE.match(text):
        return int(text)
    return None


def week_token(week: int) -> str:
    """Canonical zero-padded token: ``3 -> 'w03'``."""
    if week < 0:
        raise ValueError(f"Week must not be negative, got {week}")
    return f"w{week:02d}"


def course_slug(course: CourseLevel | str) -> str:
    """Student-facing slug for a course alias (``'A1' -> 'aleman1'``)."""
    level = normalize_course(course)
    if level is None:
        raise ValueError(f"Unknown course '{course}'. Valid options: {', '.join(sorted(COURSE_ALIASES))}")
    return COURSE_SLUGS[level]


def session_id(course: CourseLevel | str, week: int | str) -> str:
    """Session identifier stored with submissions, e.g. ``'aleman1-w01'``."""
    number = normalize_week(week)
    if number is None:
        raise ValueError(f"Unrecognized week '{week}'")
    return f"{course_slug(course)}-{week_token(number)}"


__all__ = [
    "COURSE_ALIASES",
    "COURSE_SLUGS",
    "WEEK_TOKEN_RE",
    "course_slug",
    "normalize_course",
    "normalize_week",
    "session_id",
    "week_token",
]
