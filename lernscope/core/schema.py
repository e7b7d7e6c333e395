"""
Week context schema: what has been taught, what has not, and what a reviewer
may correct for one week of one course.

Every model is frozen and uses tuples for sequences so a validated
``WeekContext`` can be shared freely between callers. Structural checks are
done by pydantic; cross-field consistency is checked once the structure is
sound and reported in the same error so callers see every problem at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .topics import (
    ALWAYS_CORRECTABLE,
    NEVER_CORRECTABLE,
    CorrectionTopic,
    CourseLevel,
    GrammarTopic,
    SociopragmaticTopic,
    Tolerance,
    VocabularyTopic,
    correction_topics_for,
    in_declaration_order,
)

MAX_ISSUES_BOUND = 5
WEEK_SLUG_PATTERN = r"^w\d{1,2}$"
CONSISTENCY_ERROR_TYPE = "scope_consistency"

_SLUG_RE = re.compile(WEEK_SLUG_PATTERN)


class _ScopeModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============== Grammar ==============


class LearnedItem(_ScopeModel):
    """A sub-topic flag with optional example list."""

    learned: bool
    examples: Tuple[str, ...] = ()


class NumberRange(_ScopeModel):
    low: int = Field(default=0, ge=0)
    high: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "NumberRange":
        if self.high is not None and self.high < self.low:
            raise ValueError(f"range upper bound {self.high} is below lower bound {self.low}")
        return self


class Cardinals(_ScopeModel):
    learned: bool
    range: Optional[NumberRange] = None


class Numerals(_ScopeModel):
    cardinals: Optional[Cardinals] = None


class DefiniteArticles(_ScopeModel):
    learned: bool
    forms: Tuple[Literal["der", "die", "das"], ...] = ()


class IndefiniteArticles(_ScopeModel):
    learned: bool
    forms: Tuple[Literal["ein", "eine"], ...] = ()


class NegativeArticles(_ScopeModel):
    learned: bool
    forms: Tuple[Literal["kein", "keine"], ...] = ()


class Articles(_ScopeModel):
    definite: Optional[DefiniteArticles] = None
    indefinite: Optional[IndefiniteArticles] = None
    negative: Optional[NegativeArticles] = None


class CaseUsage(_ScopeModel):
    learned: bool
    articles: Tuple[str, ...] = ()
    usage: Tuple[str, ...] = ()


class Cases(_ScopeModel):
    nominative: Optional[CaseUsage] = None
    accusative: Optional[CaseUsage] = None
    dative: Optional[CaseUsage] = None
    genitive: Optional[CaseUsage] = None


class Conjugation(_ScopeModel):
    verbs: Tuple[str, ...]
    personal_pronouns: Tuple[str, ...] = ()
    regular: Tuple[str, ...] = ()
    irregular: Tuple[str, ...] = ()


class SeparableVerbs(_ScopeModel):
    learned: bool
    prefixes: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()


ModalVerb = Literal["mögen", "möchten", "können", "müssen", "dürfen", "wollen", "sollen"]


class ModalVerbs(_ScopeModel):
    learned: bool
    verbs: Tuple[ModalVerb, ...] = ()
    conjugated: Optional[bool] = None


class PossessiveArticles(_ScopeModel):
    learned: bool
    forms: Tuple[str, ...] = ()
    nominative_only: Optional[bool] = None


class IndefinitePronoun(_ScopeModel):
    learned: bool
    forms: Tuple[Literal["man"], ...] = ()


class NegationForm(_ScopeModel):
    learned: bool
    usage: Tuple[str, ...] = ()


class Negation(_ScopeModel):
    nicht: Optional[NegationForm] = None
    kein: Optional[NegationForm] = None


class PluralPair(_ScopeModel):
    singular: str
    plural: str


class Plural(_ScopeModel):
    learned: bool
    endings: Tuple[str, ...] = ()
    examples: Tuple[PluralPair, ...] = ()


class Adverbs(_ScopeModel):
    temporal: Optional[LearnedItem] = None
    modal: Optional[LearnedItem] = None
    frequency: Optional[LearnedItem] = None


def _learned(item: Any) -> bool:
    return item is not None and bool(getattr(item, "learned", False))


class GrammarRecord(_ScopeModel):
    """Grammar covered up to and including the week."""

    verb_second_position: bool
    statements: Optional[bool] = None
    w_questions: Tuple[str, ...] = ()
    yes_no_questions: Optional[bool] = None
    cases: Optional[Cases] = None
    articles: Optional[Articles] = None
    conjugation: Optional[Conjugation] = None
    separable_verbs: Optional[SeparableVerbs] = None
    modal_verbs: Optional[ModalVerbs] = None
    personal_pronouns: Tuple[str, ...] = ()
    possessive_articles: Optional[PossessiveArticles] = None
    indefinite_pronoun: Optional[IndefinitePronoun] = None
    numerals: Optional[Numerals] = None
    plural: Optional[Plural] = None
    negation: Optional[Negation] = None
    adverbs: Optional[Adverbs] = None

    def taught_topics(self) -> FrozenSet[GrammarTopic]:
        """Grammar topics this record marks as learned."""
        topics = set()
        if self.verb_second_position:
            topics.add(GrammarTopic.VERBZWEITSTELLUNG)
        if self.statements:
            topics.add(GrammarTopic.AUSSAGESATZ)
        if self.w_questions:
            topics.add(GrammarTopic.W_FRAGEN)
        if self.yes_no_questions:
            topics.add(GrammarTopic.JA_NEIN_FRAGEN)
        if self.conjugation is not None and self.conjugation.verbs:
            topics.add(GrammarTopic.KONJUGATION)
        if self.personal_pronouns or (self.conjugation is not None and self.conjugation.personal_pronouns):
            topics.add(GrammarTopic.PERSONALPRONOMEN)
        if self.cases is not None:
            for case, topic in (
                (self.cases.nominative, GrammarTopic.NOMINATIV),
                (self.cases.accusative, GrammarTopic.AKKUSATIV),
                (self.cases.dative, GrammarTopic.DATIV),
                (self.cases.genitive, GrammarTopic.GENITIV),
            ):
                if _learned(case):
                    topics.add(topic)
        if self.articles is not None and any(
            _learned(kind) for kind in (self.articles.definite, self.articles.indefinite, self.articles.negative)
        ):
            topics.add(GrammarTopic.ARTIKEL)
        for item, topic in (
            (self.separable_verbs, GrammarTopic.TRENNBARE_VERBEN),
            (self.modal_verbs, GrammarTopic.MODALVERBEN),
            (self.possessive_articles, GrammarTopic.POSSESSIVARTIKEL),
            (self.indefinite_pronoun, GrammarTopic.INDEFINITPRONOMEN),
            (self.plural, GrammarTopic.PLURAL),
        ):
            if _learned(item):
                topics.add(topic)
        if self.numerals is not None and _learned(self.numerals.cardinals):
            topics.add(GrammarTopic.ZAHLEN)
        if self.negation is not None and (_learned(self.negation.nicht) or _learned(self.negation.kein)):
            topics.add(GrammarTopic.NEGATION)
        if self.adverbs is not None and any(
            _learned(kind) for kind in (self.adverbs.temporal, self.adverbs.modal, self.adverbs.frequency)
        ):
            topics.add(GrammarTopic.ADVERBIEN)
        return frozenset(topics)


# ============== Vocabulary ==============


class Alphabet(_ScopeModel):
    learned: bool
    spelling: Optional[bool] = None


class Food(_ScopeModel):
    learned: bool
    categories: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()


class Weekdays(_ScopeModel):
    learned: bool
    complete: Optional[bool] = None


class ClockTime(_ScopeModel):
    learned: bool
    formal: Tuple[str, ...] = ()
    informal: Tuple[str, ...] = ()


class Activities(_ScopeModel):
    learned: bool
    weekend: Tuple[str, ...] = ()
    daily_routine: Tuple[str, ...] = ()


class Expressions(_ScopeModel):
    greeting: Tuple[str, ...] = ()
    farewell: Tuple[str, ...] = ()
    restaurant: Tuple[str, ...] = ()
    shopping: Tuple[str, ...] = ()


_VOCABULARY_FIELDS: Tuple[Tuple[str, VocabularyTopic], ...] = (
    ("alphabet", VocabularyTopic.ALPHABET),
    ("countries", VocabularyTopic.LAENDER),
    ("languages", VocabularyTopic.SPRACHEN),
    ("professions", VocabularyTopic.BERUFE),
    ("family", VocabularyTopic.FAMILIE),
    ("household_items", VocabularyTopic.HAUSHALTSACHEN),
    ("school_items", VocabularyTopic.SCHULSACHEN),
    ("food", VocabularyTopic.LEBENSMITTEL),
    ("drinks", VocabularyTopic.GETRAENKE),
    ("packaging", VocabularyTopic.VERPACKUNGEN),
    ("measures", VocabularyTopic.MASSEINHEITEN),
    ("weekdays", VocabularyTopic.WOCHENTAGE),
    ("clock_time", VocabularyTopic.UHRZEIT),
    ("activities", VocabularyTopic.AKTIVITAETEN),
)


class VocabularyRecord(_ScopeModel):
    """Vocabulary themes plus word fields with examples."""

    themes: Tuple[VocabularyTopic, ...]
    alphabet: Optional[Alphabet] = None
    countries: Optional[LearnedItem] = None
    languages: Optional[LearnedItem] = None
    professions: Optional[LearnedItem] = None
    family: Optional[LearnedItem] = None
    household_items: Optional[LearnedItem] = None
    school_items: Optional[LearnedItem] = None
    food: Optional[Food] = None
    drinks: Optional[LearnedItem] = None
    packaging: Optional[LearnedItem] = None
    measures: Optional[LearnedItem] = None
    weekdays: Optional[Weekdays] = None
    clock_time: Optional[ClockTime] = None
    activities: Optional[Activities] = None
    expressions: Optional[Expressions] = None

    def taught_topics(self) -> FrozenSet[VocabularyTopic]:
        topics = set(self.themes)
        for name, topic in _VOCABULARY_FIELDS:
            if _learned(getattr(self, name)):
                topics.add(topic)
        return frozenset(topics)


# ============== Week context ==============


class TaughtContent(_ScopeModel):
    grammar: GrammarRecord
    vocabulary: VocabularyRecord
    sociopragmatics: Tuple[SociopragmaticTopic, ...]


class NotTaughtContent(_ScopeModel):
    """Topics explicitly excluded so the reviewer does not correct them early."""

    grammar: Tuple[GrammarTopic, ...]
    vocabulary: Tuple[VocabularyTopic, ...] = ()
    sociopragmatics: Tuple[SociopragmaticTopic, ...]


class CorrectionPolicy(_ScopeModel):
    """What the reviewer may flag, must ignore, and how much feedback to give."""

    may_correct: Tuple[CorrectionTopic, ...]
    must_not_correct: Tuple[CorrectionTopic, ...]
    max_issues: int = Field(..., ge=1, le=MAX_ISSUES_BOUND)
    avoid_over_correction: bool
    # Advisory only; no consistency rules apply.
    focus: Tuple[str, ...] = ()
    tolerance: Optional[Tolerance] = None

    @field_validator("may_correct")
    @classmethod
    def check_correctable(cls, value: Tuple[CorrectionTopic, ...]) -> Tuple[CorrectionTopic, ...]:
        rejected = in_declaration_order(set(value) & NEVER_CORRECTABLE, CorrectionTopic)
        if rejected:
            labels = ", ".join(topic.value for topic in rejected)
            raise ValueError(f"{labels} can only be listed in must_not_correct")
        return value

    @field_validator("must_not_correct")
    @classmethod
    def check_forbiddable(cls, value: Tuple[CorrectionTopic, ...]) -> Tuple[CorrectionTopic, ...]:
        rejected = in_declaration_order(set(value) & ALWAYS_CORRECTABLE, CorrectionTopic)
        if rejected:
            labels = ", ".join(topic.value for topic in rejected)
            raise ValueError(f"{labels} can only be listed in may_correct")
        return value


class Notes(_ScopeModel):
    focal_point: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()


class WeekContext(_ScopeModel):
    """Validated teaching and correction scope for one course week."""

    course: CourseLevel
    week: int = Field(..., gt=0)
    slug: Optional[str] = Field(default=None, pattern=WEEK_SLUG_PATTERN)
    title: str = Field(..., min_length=1)
    taught: TaughtContent
    not_taught: NotTaughtContent
    correction_policy: CorrectionPolicy
    notes: Optional[Notes] = None

    @property
    def key(self) -> Tuple[CourseLevel, int]:
        return (self.course, self.week)

    @model_validator(mode="after")
    def check_consistency(self) -> "WeekContext":
        issues = consistency_issues(self)
        if issues:
            raise PydanticCustomError(
                CONSISTENCY_ERROR_TYPE,
                "{count} consistency issue(s): {summary}",
                {
                    "count": len(issues),
                    "summary": "; ".join(str(issue) for issue in issues),
                    "issues": [[issue.location, issue.message] for issue in issues],
                },
            )
        return self


# ============== Validation ==============


@dataclass(frozen=True)
class ScopeIssue:
    """One problem found in a week context candidate."""

    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class WeekContextValidationError(ValueError):
    """Raised by ``validate_week_context`` with every issue found."""

    def __init__(self, issues: List[ScopeIssue]):
        self.issues = list(issues)
        summary = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid week context ({len(self.issues)} issue(s)): {summary}")


@dataclass
class ScopeValidationResult:
    """Result of a non-raising validation."""

    valid: bool
    issues: List[ScopeIssue]
    warnings: List[str] = field(default_factory=list)
    data: Optional[WeekContext] = None

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise WeekContextValidationError(self.issues)


def _duplicates(values: Tuple[Any, ...]) -> List[Any]:
    seen = set()
    repeated = []
    for value in values:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _label(topic: Any) -> str:
    return getattr(topic, "value", str(topic))


def consistency_issues(context: WeekContext) -> List[ScopeIssue]:
    """Cross-field problems in a structurally valid context, in a stable order."""
    issues: List[ScopeIssue] = []
    policy = context.correction_policy

    if context.slug is not None and int(context.slug[1:]) != context.week:
        issues.append(ScopeIssue("slug", f"slug '{context.slug}' does not match week {context.week}"))

    for name in ("may_correct", "must_not_correct"):
        for topic in _duplicates(getattr(policy, name)):
            issues.append(ScopeIssue(f"correction_policy.{name}", f"'{_label(topic)}' is listed more than once"))

    forbidden = set(policy.must_not_correct)
    for topic in policy.may_correct:
        if topic in forbidden:
            issues.append(
                ScopeIssue("correction_policy", f"'{_label(topic)}' is both in may_correct and must_not_correct")
            )

    permitted = set(policy.may_correct)
    for domain, topics in (("grammar", context.not_taught.grammar), ("vocabulary", context.not_taught.vocabulary)):
        for topic in topics:
            for counterpart in in_declaration_order(correction_topics_for(topic) & permitted, CorrectionTopic):
                issues.append(
                    ScopeIssue(
                        "correction_policy.may_correct",
                        f"'{_label(topic)}' is listed in not_taught.{domain} "
                        f"but '{_label(counterpart)}' may be corrected",
                    )
                )

    taught = context.taught
    for domain, taught_topics, excluded, enum_cls in (
        ("grammar", taught.grammar.taught_topics(), context.not_taught.grammar, GrammarTopic),
        ("vocabulary", taught.vocabulary.taught_topics(), context.not_taught.vocabulary, VocabularyTopic),
        ("sociopragmatics", frozenset(taught.sociopragmatics), context.not_taught.sociopragmatics, SociopragmaticTopic),
    ):
        for topic in in_declaration_order(taught_topics & set(excluded), enum_cls):
            issues.append(
                ScopeIssue(f"not_taught.{domain}", f"'{_label(topic)}' is marked both taught and not taught")
            )
    return issues


def _advisory_warnings(context: WeekContext) -> List[str]:
    warnings: List[str] = []
    if context.slug is None:
        warnings.append(f"{context.course.value} week {context.week}: no slug declared")
    if not context.correction_policy.may_correct:
        warnings.append(f"{context.course.value} week {context.week}: may_correct is empty")
    if context.notes is None or not context.notes.focal_point:
        warnings.append(f"{context.course.value} week {context.week}: no focal point in notes")
    return warnings


def issues_from_pydantic(exc: ValidationError) -> List[ScopeIssue]:
    """Flatten a pydantic ValidationError into scope issues."""
    issues: List[ScopeIssue] = []
    for error in exc.errors():
        if error.get("type") == CONSISTENCY_ERROR_TYPE:
            for location, message in error.get("ctx", {}).get("issues", []):
                issues.append(ScopeIssue(location, message))
            continue
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        issues.append(ScopeIssue(location, error["msg"]))
    return issues


def validate_week_context(candidate: Any) -> WeekContext:
    """Validate a mapping (or an existing context) and return a WeekContext.

    Raises:
        WeekContextValidationError: listing every structural and consistency issue.
    """
    if isinstance(candidate, WeekContext):
        return candidate
    try:
        return WeekContext.model_validate(candidate)
    except ValidationError as exc:
        raise WeekContextValidationError(issues_from_pydantic(exc)) from exc


def validate_week_context_safe(candidate: Any) -> ScopeValidationResult:
    """Same checks as ``validate_week_context`` without raising."""
    try:
        context = validate_week_context(candidate)
    except WeekContextValidationError as exc:
        return ScopeValidationResult(valid=False, issues=exc.issues)
    return ScopeValidationResult(valid=True, issues=[], warnings=_advisory_warnings(context), data=context)


__all__ = [
    "CorrectionPolicy",
    "GrammarRecord",
    "MAX_ISSUES_BOUND",
    "NotTaughtContent",
    "Notes",
    "ScopeIssue",
    "ScopeValidationResult",
    "TaughtContent",
    "VocabularyRecord",
    "WEEK_SLUG_PATTERN",
    "WeekContext",
    "WeekContextValidationError",
    "consistency_issues",
    "issues_from_pydantic",
    "validate_week_context",
    "validate_week_context_safe",
]
