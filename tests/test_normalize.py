from __future__ import annotations

import pytest

from lernscope.core.topics import CourseLevel
from lernscope.weeks.normalize import course_slug, normalize_course, normalize_week, session_id, week_token


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("A1", CourseLevel.A1),
        ("a1", CourseLevel.A1),
        ("aleman1", CourseLevel.A1),
        (" Aleman-1 ", CourseLevel.A1),
        ("A2", CourseLevel.A2),
        ("aleman2", CourseLevel.A2),
        (CourseLevel.A2, CourseLevel.A2),
    ],
)
def test_normalize_course_accepts_aliases(raw, expected) -> None:
    assert normalize_course(raw) is expected


@pytest.mark.parametrize("raw", ["aleman9", "B1", "", None, 1])
def test_normalize_course_rejects_unknown(raw) -> None:
    assert normalize_course(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(1, 1), ("1", 1), ("w01", 1), ("w1", 1), ("W12", 12), (" 3 ", 3), (0, 0), ("13", 13)],
)
def test_normalize_week_parses_numbers_and_tokens(raw, expected) -> None:
    assert normalize_week(raw) == expected


@pytest.mark.parametrize("raw", ["week1", "w", "w001", "", "1.5", None, True, 2.0])
def test_normalize_week_rejects_garbage(raw) -> None:
    assert normalize_week(raw) is None


def test_week_token_is_zero_padded() -> None:
    assert week_token(1) == "w01"
    assert week_token(12) == "w12"
    with pytest.raises(ValueError):
        week_token(-1)


def test_session_id_uses_student_facing_slug() -> None:
    assert course_slug("A1") == "aleman1"
    assert course_slug(CourseLevel.A2) == "aleman2"
    assert session_id("A1", 1) == "aleman1-w01"
    assert session_id("aleman2", "w2") == "aleman2-w02"


def test_session_id_rejects_unknown_inputs() -> None:
    with pytest.raises(ValueError, match="Unknown course"):
        session_id("aleman9", 1)
    with pytest.raises(ValueError, match="Unrecognized week"):
        session_id("A1", "next")
