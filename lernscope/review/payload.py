"""
Instruction payload and scope snapshot built from a resolved WeekContext.

The payload is the structured, model-agnostic contract handed to whatever
produces review feedback; wording lives in ``lernscope.review.prompt``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, TypedDict

from pydantic import BaseModel, ConfigDict

from lernscope.core.errors import PayloadInvariantViolation
from lernscope.core.schema import WeekContext
from lernscope.core.topics import (
    CorrectionTopic,
    CourseLevel,
    GrammarTopic,
    Tolerance,
    VocabularyTopic,
    in_declaration_order,
)

LOGGER = logging.getLogger(__name__)


class TopicSummary(BaseModel):
    """Topic labels per domain."""

    model_config = ConfigDict(frozen=True)

    grammar: Tuple[str, ...] = ()
    vocabulary: Tuple[str, ...] = ()
    sociopragmatics: Tuple[str, ...] = ()


class InstructionPayload(BaseModel):
    """Everything a reviewer must follow for one submission."""

    model_config = ConfigDict(frozen=True)

    course: CourseLevel
    week: int
    title: str
    student_name: str
    correctable_topics: Tuple[CorrectionTopic, ...]
    forbidden_topics: Tuple[CorrectionTopic, ...]
    max_issues: int
    tolerance: Optional[Tolerance] = None
    avoid_over_correction: bool
    focus: Tuple[str, ...] = ()
    taught: TopicSummary
    not_taught: TopicSummary
    submission_text: str


class ScopeSnapshot(TypedDict):
    """Minimal excerpt of a WeekContext stored next to a submission."""

    course: str
    week: int
    title: str
    may_correct: List[str]
    max_issues: int


def _overlap(context: WeekContext) -> List[str]:
    forbidden = set(context.correction_policy.must_not_correct)
    return [topic.value for topic in context.correction_policy.may_correct if topic in forbidden]


def _taught_summary(context: WeekContext) -> TopicSummary:
    taught = context.taught
    return TopicSummary(
        grammar=tuple(topic.value for topic in in_declaration_order(taught.grammar.taught_topics(), GrammarTopic)),
        vocabulary=tuple(
            topic.value for topic in in_declaration_order(taught.vocabulary.taught_topics(), VocabularyTopic)
        ),
        sociopragmatics=tuple(topic.value for topic in taught.sociopragmatics),
    )


def _not_taught_summary(context: WeekContext) -> TopicSummary:
    not_taught = context.not_taught
    return TopicSummary(
        grammar=tuple(topic.value for topic in not_taught.grammar),
        vocabulary=tuple(topic.value for topic in not_taught.vocabulary),
        sociopragmatics=tuple(topic.value for topic in not_taught.sociopragmatics),
    )


def build_instruction_payload(context: WeekContext, submission_text: str, student_name: str) -> InstructionPayload:
    """Combine a week's scope with one submission.

    The submission text is carried verbatim. Output depends only on the
    arguments, so equal inputs give equal payloads.

    Raises:
        PayloadInvariantViolation: if a topic is both correctable and forbidden.
    """
    overlap = _overlap(context)
    if overlap:
        LOGGER.error(
            "Correction scope for %s week %s permits and forbids %s",
            context.course.value,
            context.week,
            ", ".join(overlap),
        )
        raise PayloadInvariantViolation(context.course.value, context.week, overlap)

    policy = context.correction_policy
    return InstructionPayload(
        course=context.course,
        week=context.week,
        title=context.title,
        student_name=student_name.strip(),
        correctable_topics=policy.may_correct,
        forbidden_topics=policy.must_not_correct,
        max_issues=policy.max_issues,
        tolerance=policy.tolerance,
        avoid_over_correction=policy.avoid_over_correction,
        focus=policy.focus,
        taught=_taught_summary(context),
        not_taught=_not_taught_summary(context),
        submission_text=submission_text,
    )


def build_scope_snapshot(context: WeekContext) -> ScopeSnapshot:
    """Plain, JSON-serializable record of the rules active for this week."""
    return ScopeSnapshot(
        course=context.course.value,
        week=context.week,
        title=context.title,
        may_correct=[topic.value for topic in context.correction_policy.may_correct],
        max_issues=context.correction_policy.max_issues,
    )


__all__ = [
    "InstructionPayload",
    "ScopeSnapshot",
    "TopicSummary",
    "build_instruction_payload",
    "build_scope_snapshot",
]
