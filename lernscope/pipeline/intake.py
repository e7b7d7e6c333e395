"""Submission intake: validate, scope, review and persist one student answer."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from lernscope.core.submissions import SubmissionRecord
from lernscope.review.collaborators import ReviewGenerator, SubmissionStore
from lernscope.review.payload import InstructionPayload, build_instruction_payload, build_scope_snapshot
from lernscope.weeks.normalize import COURSE_SLUGS, course_slug, week_token
from lernscope.weeks.registry import WeekRegistry

LOGGER = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SubmissionInput(BaseModel):
    """Externally supplied submission; accepts camelCase keys from the web form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: Optional[str] = None
    level: str
    week: str = Field(..., pattern=r"^w\d{1,2}$")
    content: str = Field(..., min_length=10)

    @field_validator("first_name", "last_name", "level", "week", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not re.match(EMAIL_PATTERN, value):
            raise ValueError("invalid email address")
        return value

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        slug = value.lower()
        if slug not in COURSE_SLUGS.values():
            raise ValueError(f"level must be one of: {', '.join(sorted(COURSE_SLUGS.values()))}")
        return slug


class SubmissionOutcome(BaseModel):
    """What intake hands back to the caller."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    feedback: str
    record: SubmissionRecord
    payload: InstructionPayload


class SubmissionIntake:
    """Wire the registry to the injected generation and persistence capabilities."""

    def __init__(self, registry: WeekRegistry, generator: ReviewGenerator, store: SubmissionStore):
        self.registry = registry
        self.generator = generator
        self.store = store

    def submit(self, submission: SubmissionInput) -> SubmissionOutcome:
        """Review and persist a submission.

        Raises:
            ConfigurationFault: when the course/week is unknown, out of range or not implemented.
            PayloadInvariantViolation: when the week's scope is inconsistent.
        """
        context = self.registry.assert_valid(submission.level, submission.week)
        payload = build_instruction_payload(context, submission.content, submission.first_name)
        feedback = self.generator.generate_review(payload)

        level = course_slug(context.course)
        week_id = week_token(context.week)
        record = SubmissionRecord(
            first_name=submission.first_name,
            last_name=submission.last_name,
            student_name=f"{submission.first_name} {submission.last_name}",
            email=submission.email,
            level=level,
            week_id=week_id,
            session_id=f"{level}-{week_id}",
            content=submission.content,
            feedback=feedback,
            scope=dict(build_scope_snapshot(context)),
        )
        stored = self.store.save(record)
        LOGGER.info("Stored submission %s for %s", stored.session_id, stored.student_name)
        return SubmissionOutcome(feedback=feedback, record=stored, payload=payload)


__all__ = ["SubmissionInput", "SubmissionIntake", "SubmissionOutcome"]
