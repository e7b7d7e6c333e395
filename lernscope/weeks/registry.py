"""
In-memory index from (course, week) to a validated WeekContext.

The registry is built once and only read afterwards. Lookups are plain dict
reads keyed by ``(CourseLevel, week)``, so they are safe to call from any
number of threads.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from lernscope.core.config import DEFAULT_MAX_WEEK, DEFAULT_MIN_WEEK, DuplicatePolicy, RegistryConfig
from lernscope.core.errors import ConfigurationFault
from lernscope.core.schema import WeekContext, validate_week_context
from lernscope.core.topics import CourseLevel

from .loader import load_week_contexts
from .normalize import COURSE_ALIASES, normalize_course, normalize_week

LOGGER = logging.getLogger(__name__)

WeekKey = Tuple[CourseLevel, int]


@dataclass(frozen=True)
class WeekNotFound:
    """No context is registered for the requested course/week.

    ``reason`` is ``unknown_course``, ``invalid_week`` or ``unknown_week``.
    Instances are falsy so callers can write ``if not result``.
    """

    course: Any
    week: Any
    reason: str

    def __bool__(self) -> bool:
        return False


class WeekSummary(BaseModel):
    """Lightweight projection of a week context."""

    model_config = ConfigDict(frozen=True)

    course: CourseLevel
    week: int
    title: str
    focal_point: Optional[str] = None
    themes: Tuple[str, ...] = ()
    may_correct: Tuple[str, ...] = ()
    max_issues: int


class WeekRegistry:
    """Read-only lookup over authored week contexts."""

    def __init__(
        self,
        contexts: Iterable[WeekContext | Dict[str, Any]],
        *,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.LAST_WINS,
        min_week: int = DEFAULT_MIN_WEEK,
        max_week: int = DEFAULT_MAX_WEEK,
    ):
        if min_week > max_week:
            raise ValueError(f"min_week ({min_week}) must not exceed max_week ({max_week})")
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self.min_week = min_week
        self.max_week = max_week

        index: Dict[WeekKey, WeekContext] = {}
        for candidate in contexts:
            context = validate_week_context(candidate)
            if not self._in_range(context.week):
                raise ConfigurationFault(
                    "week_out_of_range",
                    f"{context.course.value} week {context.week} is outside the valid range [{min_week}, {max_week}]",
                )
            if context.key in index:
                previous = index[context.key]
                if self.duplicate_policy is DuplicatePolicy.REJECT:
                    raise ConfigurationFault(
                        "duplicate_week",
                        f"{context.course.value} week {context.week} is defined more than once",
                        details=[previous.title, context.title],
                    )
                LOGGER.warning(
                    "%s week %s registered twice; replacing '%s' with '%s'",
                    context.course.value,
                    context.week,
                    previous.title,
                    context.title,
                )
            index[context.key] = context

        weeks: Dict[CourseLevel, List[int]] = {}
        for course, week in index:
            weeks.setdefault(course, []).append(week)

        self._index: Mapping[WeekKey, WeekContext] = MappingProxyType(index)
        self._weeks: Mapping[CourseLevel, Tuple[int, ...]] = MappingProxyType(
            {course: tuple(sorted(numbers)) for course, numbers in weeks.items()}
        )
        LOGGER.info("Registered %d week contexts across %d course(s)", len(index), len(self._weeks))

    def _in_range(self, week: int) -> bool:
        return self.min_week <= week <= self.max_week

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[WeekContext]:
        for course in CourseLevel:
            for week in self._weeks.get(course, ()):
                yield self._index[(course, week)]

    # ============== Lookups ==============

    def resolve(self, course: Any, week: Any) -> WeekContext | WeekNotFound:
        """Return the context for ``(course, week)`` or a WeekNotFound; never raises."""
        level = normalize_course(course)
        if level is None:
            return WeekNotFound(course, week, "unknown_course")
        number = normalize_week(week)
        if number is None:
            return WeekNotFound(course, week, "invalid_week")
        context = self._index.get((level, number))
        if context is None:
            return WeekNotFound(course, week, "unknown_week")
        return context

    def exists(self, course: Any, week: Any) -> bool:
        return isinstance(self.resolve(course, week), WeekContext)

    def list_weeks(self, course: Any) -> Tuple[int, ...]:
        """Registered weeks of a course in ascending order; empty when unknown."""
        level = normalize_course(course)
        if level is None:
            return ()
        return self._weeks.get(level, ())

    def list_courses(self) -> FrozenSet[CourseLevel]:
        return frozenset(self._weeks)

    def summarize(self, course: Any, week: Any) -> WeekSummary | WeekNotFound:
        resolved = self.resolve(course, week)
        if isinstance(resolved, WeekNotFound):
            return resolved
        notes = resolved.notes
        return WeekSummary(
            course=resolved.course,
            week=resolved.week,
            title=resolved.title,
            focal_point=notes.focal_point if notes is not None else None,
            themes=tuple(topic.value for topic in resolved.taught.vocabulary.themes),
            may_correct=tuple(topic.value for topic in resolved.correction_policy.may_correct),
            max_issues=resolved.correction_policy.max_issues,
        )

    def assert_valid(self, course: Any, week: Any) -> WeekContext:
        """Return the context or raise ConfigurationFault explaining why it is unavailable."""
        level = normalize_course(course)
        if level is None:
            raise ConfigurationFault(
                "unknown_course",
                f"Unknown course '{course}'. Valid options: {', '.join(sorted(COURSE_ALIASES))}",
            )
        number = normalize_week(week)
        if number is None:
            raise ConfigurationFault(
                "invalid_week",
                f"Unrecognized week '{week}'. Expected a number or a token like 'w01'",
            )
        if not self._in_range(number):
            raise ConfigurationFault(
                "week_out_of_range",
                f"Week {number} is out of the valid range [{self.min_week}, {self.max_week}]",
            )
        context = self._index.get((level, number))
        if context is None:
            implemented = ", ".join(str(w) for w in self._weeks.get(level, ())) or "none"
            raise ConfigurationFault(
                "unknown_week",
                f"Unknown week: week {number} of course {level.value} is not implemented (available: {implemented})",
            )
        return context


def build_registry(config: RegistryConfig | None = None) -> WeekRegistry:
    """Load week files and build a registry according to ``config``."""
    config = config or RegistryConfig()
    contexts = load_week_contexts(config.data_dir)
    return WeekRegistry(
        contexts,
        duplicate_policy=config.duplicate_policy,
        min_week=config.min_week,
        max_week=config.max_week,
    )


_DEFAULT_REGISTRY: WeekRegistry | None = None
_DEFAULT_LOCK = threading.Lock()


def get_default_registry() -> WeekRegistry:
    """Process-wide registry over the packaged week data, built on first use."""
    global _DEFAULT_REGISTRY
    registry = _DEFAULT_REGISTRY
    if registry is None:
        with _DEFAULT_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = build_registry()
            registry = _DEFAULT_REGISTRY
    return registry


__all__ = [
    "WeekNotFound",
    "WeekRegistry",
    "WeekSummary",
    "build_registry",
    "get_default_registry",
]
