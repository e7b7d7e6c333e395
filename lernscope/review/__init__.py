"""Turn a resolved week scope plus a submission into reviewer instructions."""

from __future__ import annotations

from .collaborators import OfflineReviewGenerator, ReviewGenerator, SubmissionStore
from .payload import InstructionPayload, ScopeSnapshot, TopicSummary, build_instruction_payload, build_scope_snapshot
from .prompt import render_review_prompt

__all__ = [
    "InstructionPayload",
    "OfflineReviewGenerator",
    "ReviewGenerator",
    "ScopeSnapshot",
    "SubmissionStore",
    "TopicSummary",
    "build_instruction_payload",
    "build_scope_snapshot",
    "render_review_prompt",
]
