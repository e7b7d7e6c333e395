"""
Typed configuration for the scope resolver and the submission intake.

Everything has a default so the registry can be built with no config file at
all; a YAML file only overrides what it names.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

DEFAULT_MIN_WEEK = 1
DEFAULT_MAX_WEEK = 12


class DuplicatePolicy(str, Enum):
    """How the registry treats two contexts authored for the same (course, week)."""

    LAST_WINS = "last_wins"
    REJECT = "reject"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class RegistryConfig(BaseModel):
    """Where week contexts come from and which week numbers are legal."""

    model_config = ConfigDict(extra="forbid")

    data_dir: Optional[Path] = Field(
        default=None, description="Directory of week YAML files; packaged data when unset."
    )
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.LAST_WINS
    min_week: int = Field(default=DEFAULT_MIN_WEEK, ge=1)
    max_week: int = Field(default=DEFAULT_MAX_WEEK, ge=1, le=52)

    @field_validator("data_dir", mode="before")
    @classmethod
    def coerce_path(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @model_validator(mode="after")
    def check_week_range(self) -> "RegistryConfig":
        if self.min_week > self.max_week:
            raise ValueError(f"min_week ({self.min_week}) must not exceed max_week ({self.max_week})")
        return self


class StoreConfig(BaseModel):
    """Local submission log used when no external store is injected."""

    model_config = ConfigDict(extra="forbid")

    submissions_path: Path = Field(default=Path("outputs/submissions.jsonl"))

    @field_validator("submissions_path", mode="before")
    @classmethod
    def coerce_path(cls, value: Any) -> Path:
        # Relative paths stay relative; the loader or bootstrap picks the base.
        return Path(value).expanduser()


class ReviewConfig(BaseModel):
    """Top-level configuration."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    log_level: str = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper()
            if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
                raise ValueError(f"Unknown log level '{value}'")
        return value


def read_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML file and return a dictionary."""
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at root of {path}, received {type(data)}")
    return data


def _resolve_config_path(value: Any, base_dir: Path) -> str:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    else:
        path = path.resolve()
    return str(path)


def _absolutize_paths(data: Dict[str, Any], base_dir: Path) -> None:
    registry = data.get("registry")
    if isinstance(registry, dict) and registry.get("data_dir"):
        registry["data_dir"] = _resolve_config_path(registry["data_dir"], base_dir)

    store = data.get("store")
    if isinstance(store, dict) and store.get("submissions_path"):
        store["submissions_path"] = _resolve_config_path(store["submissions_path"], base_dir)


def load_review_config(path: Path, *, base_dir: Path | None = None) -> ReviewConfig:
    """Load the review config; relative paths resolve against ``base_dir`` or the file's folder."""
    path = path.expanduser().resolve()
    data = read_yaml_file(path)
    _absolutize_paths(data, base_dir=(base_dir or path.parent).resolve())
    try:
        return ReviewConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid review config in {path}") from exc
