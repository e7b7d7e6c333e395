"""Error types raised by the scope resolver.

Only two situations are raised as hard failures:

- ``ConfigurationFault``: a caller asked for a course/week that intake
  should have rejected, or the week data itself cannot be registered.
- ``PayloadInvariantViolation``: inconsistent authored data reached the
  payload builder.

Validation problems and missing weeks are returned as values instead
(see ``lernscope.core.schema`` and ``lernscope.weeks.registry``).
"""

from __future__ import annotations

from typing import List, Sequence


class ConfigurationFault(RuntimeError):
    """Raised when a course/week reference cannot be honoured.

    Attributes:
        reason: Machine-readable cause (``unknown_course``, ``invalid_week``,
            ``week_out_of_range``, ``unknown_week``, ``duplicate_week``,
            ``invalid_data``).
        details: Human-readable detail lines.
    """

    def __init__(self, reason: str, message: str, details: Sequence[str] | None = None):
        self.reason = reason
        self.details: List[str] = list(details or [])
        super().__init__(message)


class PayloadInvariantViolation(RuntimeError):
    """Raised when a week context permits and forbids the same topic."""

    def __init__(self, course: str, week: int, overlap: Sequence[str]):
        self.course = course
        self.week = week
        self.overlap: List[str] = list(overlap)
        super().__init__(
            f"{course} week {week}: topics both correctable and forbidden: {', '.join(self.overlap)}"
        )


__all__ = ["ConfigurationFault", "PayloadInvariantViolation"]
