from __future__ import annotations

import logging
import threading

import pytest

from lernscope.core.config import DuplicatePolicy, RegistryConfig
from lernscope.core.errors import ConfigurationFault
from lernscope.core.schema import WeekContext, WeekContextValidationError, consistency_issues
from lernscope.core.topics import CorrectionTopic, CourseLevel
from lernscope.weeks import registry as registry_module
from lernscope.weeks.registry import WeekNotFound, WeekRegistry, WeekSummary, build_registry, get_default_registry


@pytest.fixture(scope="module")
def packaged() -> WeekRegistry:
    return build_registry()


def test_packaged_registry_covers_both_courses(packaged: WeekRegistry) -> None:
    assert len(packaged) == 4
    assert packaged.list_courses() == frozenset({CourseLevel.A1, CourseLevel.A2})
    assert packaged.list_weeks("A1") == (1, 2)
    assert packaged.list_weeks("aleman2") == (1, 2)


def test_resolve_returns_context_for_key(packaged: WeekRegistry) -> None:
    context = packaged.resolve("A1", 1)

    assert isinstance(context, WeekContext)
    assert context.key == (CourseLevel.A1, 1)
    assert context.correction_policy.max_issues == 3
    assert CorrectionTopic.BEGRUESSUNG in context.correction_policy.may_correct


def test_course_aliases_resolve_to_same_context(packaged: WeekRegistry) -> None:
    assert packaged.resolve("aleman1", "w01") is packaged.resolve("A1", 1)
    assert packaged.resolve("A2", "2") is packaged.resolve("aleman2", 2)


@pytest.mark.parametrize(
    ("course", "week", "reason"),
    [
        ("aleman9", 1, "unknown_course"),
        ("A1", "next", "invalid_week"),
        ("aleman1", 99, "unknown_week"),
        ("A1", 0, "unknown_week"),
    ],
)
def test_resolve_reports_missing_weeks(packaged: WeekRegistry, course, week, reason: str) -> None:
    result = packaged.resolve(course, week)

    assert isinstance(result, WeekNotFound)
    assert result.reason == reason
    assert not result
    assert not packaged.exists(course, week)


def test_exists_agrees_with_list_weeks(packaged: WeekRegistry) -> None:
    for course in CourseLevel:
        weeks = packaged.list_weeks(course)
        assert list(weeks) == sorted(weeks)
        for week in range(0, 14):
            assert packaged.exists(course, week) == (week in weeks)


def test_list_weeks_for_unknown_course_is_empty(packaged: WeekRegistry) -> None:
    assert packaged.list_weeks("aleman9") == ()


def test_registered_contexts_are_consistent(packaged: WeekRegistry) -> None:
    for context in packaged:
        policy = context.correction_policy
        assert consistency_issues(context) == []
        assert not set(policy.may_correct) & set(policy.must_not_correct)
        assert 1 <= policy.max_issues <= 5


def test_iteration_is_ordered_by_course_then_week(packaged: WeekRegistry) -> None:
    assert [context.key for context in packaged] == [
        (CourseLevel.A1, 1),
        (CourseLevel.A1, 2),
        (CourseLevel.A2, 1),
        (CourseLevel.A2, 2),
    ]


def test_summarize_projects_context(packaged: WeekRegistry) -> None:
    summary = packaged.summarize("aleman1", 2)

    assert isinstance(summary, WeekSummary)
    assert summary.course is CourseLevel.A1
    assert summary.week == 2
    assert summary.max_issues == 3
    assert "W-Fragen" in summary.may_correct
    assert isinstance(packaged.summarize("A1", 7), WeekNotFound)


def test_assert_valid_returns_context(packaged: WeekRegistry) -> None:
    assert packaged.assert_valid("aleman2", "w01") is packaged.resolve("A2", 1)


def test_assert_valid_unknown_course_lists_options(packaged: WeekRegistry) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        packaged.assert_valid("aleman9", 1)

    assert excinfo.value.reason == "unknown_course"
    assert "aleman9" in str(excinfo.value)
    assert "aleman1" in str(excinfo.value)


@pytest.mark.parametrize("week", [0, 13])
def test_assert_valid_rejects_out_of_range_weeks(packaged: WeekRegistry, week: int) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        packaged.assert_valid("A1", week)

    assert excinfo.value.reason == "week_out_of_range"
    assert "[1, 12]" in str(excinfo.value)


def test_assert_valid_unimplemented_week(packaged: WeekRegistry) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        packaged.assert_valid("A1", 5)

    assert excinfo.value.reason == "unknown_week"
    assert "week 5 of course A1" in str(excinfo.value)
    assert "available: 1, 2" in str(excinfo.value)


def test_assert_valid_rejects_unparseable_week(packaged: WeekRegistry) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        packaged.assert_valid("A1", "soon")

    assert excinfo.value.reason == "invalid_week"


def test_duplicate_last_wins_by_default(make_week, caplog: pytest.LogCaptureFixture) -> None:
    first = make_week(title="Erste Fassung")
    second = make_week(title="Zweite Fassung")

    with caplog.at_level(logging.WARNING, logger="lernscope.weeks.registry"):
        registry = WeekRegistry([first, second])

    assert len(registry) == 1
    assert registry.resolve("A1", 1).title == "Zweite Fassung"
    assert "registered twice" in caplog.text


def test_duplicate_rejected_when_configured(make_week) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        WeekRegistry([make_week(), make_week()], duplicate_policy=DuplicatePolicy.REJECT)

    assert excinfo.value.reason == "duplicate_week"


def test_registry_rejects_week_outside_range(make_week) -> None:
    with pytest.raises(ConfigurationFault) as excinfo:
        WeekRegistry([make_week(week=14, slug="w14")])

    assert excinfo.value.reason == "week_out_of_range"


def test_registry_validates_mappings(make_week) -> None:
    data = make_week()
    data["correction_policy"]["must_not_correct"] = ["Begrüßung"]

    with pytest.raises(WeekContextValidationError):
        WeekRegistry([data])


def test_custom_week_range(make_week) -> None:
    registry = WeekRegistry([make_week(week=14, slug="w14")], min_week=1, max_week=16)

    assert registry.list_weeks("A1") == (14,)
    with pytest.raises(ConfigurationFault):
        registry.assert_valid("A1", 17)


def test_build_registry_from_directory(weeks_dir, write_week, make_week) -> None:
    write_week(weeks_dir, "a1_woche_03.yaml", make_week(week=3, slug="w03", title="Woche 3"))

    registry = build_registry(RegistryConfig(data_dir=weeks_dir))

    assert registry.list_weeks("A1") == (1, 2, 3)
    assert registry.resolve("A1", 3).title == "Woche 3"


def test_build_registry_rejects_invalid_files(weeks_dir, write_week, make_week) -> None:
    write_week(weeks_dir, "broken.yaml", make_week(course="C1"))

    with pytest.raises(ConfigurationFault) as excinfo:
        build_registry(RegistryConfig(data_dir=weeks_dir))

    assert excinfo.value.reason == "invalid_data"
    assert any(detail.startswith("broken.yaml: course") for detail in excinfo.value.details)


def test_default_registry_is_built_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry_module, "_DEFAULT_REGISTRY", None)
    calls = []
    original = registry_module.build_registry

    def counting_build(config=None):
        calls.append(config)
        return original(config)

    monkeypatch.setattr(registry_module, "build_registry", counting_build)

    results = []
    threads = [threading.Thread(target=lambda: results.append(get_default_registry())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert all(result is results[0] for result in results)
    assert get_default_registry() is results[0]
