"""Capabilities the host injects: review generation and submission persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lernscope.core.submissions import SubmissionRecord

from .payload import InstructionPayload


@runtime_checkable
class ReviewGenerator(Protocol):
    """Produces review feedback from an instruction payload."""

    def generate_review(self, payload: InstructionPayload) -> str:
        ...


@runtime_checkable
class SubmissionStore(Protocol):
    """Persists a reviewed submission and returns what was stored."""

    def save(self, record: SubmissionRecord) -> SubmissionRecord:
        ...


class OfflineReviewGenerator:
    """Deterministic placeholder used until a generation provider is wired in."""

    def generate_review(self, payload: InstructionPayload) -> str:
        topics = ", ".join(topic.value for topic in payload.correctable_topics) or "—"
        return (
            f"<p>Feedback preliminar para <strong>{payload.student_name}</strong>: "
            f"texto recibido para {payload.course.value}, Woche {payload.week}.</p>"
            f"<p>Se revisará como máximo {payload.max_issues} puntos sobre: {topics}.</p>"
        )


__all__ = ["OfflineReviewGenerator", "ReviewGenerator", "SubmissionStore"]
