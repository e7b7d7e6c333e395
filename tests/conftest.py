from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from lernscope.weeks.loader import PACKAGED_DATA_DIR

_BASE_WEEK: Dict[str, Any] = {
    "course": "A1",
    "week": 1,
    "slug": "w01",
    "title": "Begrüßungen",
    "taught": {
        "grammar": {
            "verb_second_position": True,
            "conjugation": {"verbs": ["sein", "heißen"], "personal_pronouns": ["ich", "du"]},
        },
        "vocabulary": {"themes": ["Begrüßungen", "Abschied"]},
        "sociopragmatics": ["du/Sie"],
    },
    "not_taught": {
        "grammar": ["Akkusativ", "Dativ"],
        "sociopragmatics": ["Umgangssprache"],
    },
    "correction_policy": {
        "may_correct": ["Begrüßung", "Verbformen"],
        "must_not_correct": ["Großschreibung"],
        "max_issues": 3,
        "avoid_over_correction": True,
    },
    "notes": {"focal_point": "Sich vorstellen"},
}


@pytest.fixture()
def make_week() -> Callable[..., Dict[str, Any]]:
    """Return a factory producing a fresh, valid week mapping with top-level overrides."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        data = copy.deepcopy(_BASE_WEEK)
        data.update(copy.deepcopy(overrides))
        return data

    return _make


@pytest.fixture()
def weeks_dir(tmp_path: Path) -> Path:
    """Writable copy of the packaged week files."""
    target = tmp_path / "weeks"
    target.mkdir()
    for path in sorted(PACKAGED_DATA_DIR.glob("*.yaml")):
        (target / path.name).write_text(path.read_text(encoding="utf-8"), encoding="utf-8")
    return target


@pytest.fixture()
def write_week() -> Callable[[Path, str, Dict[str, Any]], Path]:
    """Return a helper that dumps a week mapping to ``directory / name`` as YAML."""

    def _write(directory: Path, name: str, data: Dict[str, Any]) -> Path:
        path = directory / name
        path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), encoding="utf-8")
        return path

    return _write
