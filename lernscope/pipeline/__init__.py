"""Submission intake wiring for hosts (HTTP handlers, CLIs)."""

from __future__ import annotations

from .bootstrap import IntakeContext, bootstrap_intake
from .intake import SubmissionInput, SubmissionIntake, SubmissionOutcome

__all__ = [
    "IntakeContext",
    "SubmissionInput",
    "SubmissionIntake",
    "SubmissionOutcome",
    "bootstrap_intake",
]
