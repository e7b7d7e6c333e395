"""
Schema, vocabularies, configuration and error types for the scope resolver.

Nothing in here depends on the week data or the registry, so the schema can
be imported by tooling that only needs to lint YAML files.
"""

from .config import DuplicatePolicy, RegistryConfig, ReviewConfig, load_review_config
from .errors import ConfigurationFault, PayloadInvariantViolation
from .schema import (
    ScopeIssue,
    ScopeValidationResult,
    WeekContext,
    WeekContextValidationError,
    validate_week_context,
    validate_week_context_safe,
)
from .submissions import JsonlSubmissionStore, SubmissionRecord
from .topics import CorrectionTopic, CourseLevel, GrammarTopic, SociopragmaticTopic, Tolerance, VocabularyTopic

__all__ = [
    "ConfigurationFault",
    "CorrectionTopic",
    "CourseLevel",
    "DuplicatePolicy",
    "GrammarTopic",
    "JsonlSubmissionStore",
    "PayloadInvariantViolation",
    "RegistryConfig",
    "ReviewConfig",
    "ScopeIssue",
    "ScopeValidationResult",
    "SociopragmaticTopic",
    "SubmissionRecord",
    "Tolerance",
    "VocabularyTopic",
    "WeekContext",
    "WeekContextValidationError",
    "load_review_config",
    "validate_week_context",
    "validate_week_context_safe",
]
