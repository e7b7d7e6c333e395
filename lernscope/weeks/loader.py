"""Load and lint the hand-authored week context files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from lernscope.core.errors import ConfigurationFault
from lernscope.core.schema import ScopeIssue, WeekContext, validate_week_context_safe
from lernscope.core.topics import CourseLevel

PACKAGED_DATA_DIR = Path(__file__).with_name("data")


@dataclass
class WeekFile:
    """One YAML document and the outcome of validating it."""

    path: Path
    context: Optional[WeekContext] = None
    issues: List[ScopeIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.context is not None and not self.issues


def _week_paths(data_dir: Path) -> List[Path]:
    # Sorted file name order is the registration order.
    return sorted(path for path in data_dir.iterdir() if path.is_file() and path.suffix in {".yaml", ".yml"})


def _load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def load_week_files(data_dir: Path | None = None) -> List[WeekFile]:
    """Read and validate every week file; never raises on bad content."""
    data_dir = (data_dir or PACKAGED_DATA_DIR).expanduser().resolve()
    if not data_dir.is_dir():
        raise ConfigurationFault("invalid_data", f"Week data directory not found: {data_dir}")

    loaded: List[WeekFile] = []
    for path in _week_paths(data_dir):
        try:
            raw = _load_yaml(path)
        except yaml.YAMLError as exc:
            loaded.append(WeekFile(path=path, issues=[ScopeIssue("<file>", f"invalid YAML: {exc}")]))
            continue
        result = validate_week_context_safe(raw)
        loaded.append(WeekFile(path=path, context=result.data, issues=result.issues, warnings=result.warnings))
    return loaded


def load_week_contexts(data_dir: Path | None = None) -> List[WeekContext]:
    """Return validated contexts in registration order.

    Raises:
        ConfigurationFault: if any file fails validation (reason ``invalid_data``).
    """
    files = load_week_files(data_dir)
    failures = [f"{week_file.path.name}: {issue}" for week_file in files for issue in week_file.issues]
    if failures:
        raise ConfigurationFault(
            "invalid_data",
            f"{len(failures)} issue(s) in week data",
            details=failures,
        )
    return [week_file.context for week_file in files if week_file.context is not None]


def duplicate_keys(files: List[WeekFile]) -> Dict[Tuple[CourseLevel, int], List[Path]]:
    """Keys authored by more than one file, mapped to those files in registration order."""
    seen: Dict[Tuple[CourseLevel, int], List[Path]] = {}
    for week_file in files:
        if week_file.context is not None:
            seen.setdefault(week_file.context.key, []).append(week_file.path)
    return {key: paths for key, paths in seen.items() if len(paths) > 1}


def lint_week_files(files: List[WeekFile], *, min_week: int = 1, max_week: int = 12) -> tuple[list[str], list[str]]:
    """Collect errors and warnings for the validator CLI."""
    errors: list[str] = []
    warnings: list[str] = []

    for week_file in files:
        for issue in week_file.issues:
            errors.append(f"{week_file.path.name}: {issue}")
        for warning in week_file.warnings:
            warnings.append(f"{week_file.path.name}: {warning}")
        context = week_file.context
        if context is not None and not (min_week <= context.week <= max_week):
            errors.append(
                f"{week_file.path.name}: week {context.week} is outside the valid range [{min_week}, {max_week}]"
            )

    for (course, week), paths in sorted(duplicate_keys(files).items(), key=lambda item: (item[0][0].value, item[0][1])):
        names = ", ".join(path.name for path in paths)
        warnings.append(f"{course.value} week {week} is defined {len(paths)} times ({names}); {paths[-1].name} wins")

    return errors, warnings


__all__ = [
    "PACKAGED_DATA_DIR",
    "WeekFile",
    "duplicate_keys",
    "lint_week_files",
    "load_week_contexts",
    "load_week_files",
]
