"""Bootstrap helpers that assemble the registry and the intake service."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from lernscope.core.config import ReviewConfig, load_review_config
from lernscope.core.submissions import JsonlSubmissionStore
from lernscope.review.collaborators import OfflineReviewGenerator, ReviewGenerator, SubmissionStore
from lernscope.weeks.registry import WeekRegistry, build_registry

from .intake import SubmissionIntake

DEFAULT_CONFIG_PATH = Path("config/review.yaml")
CONFIG_ENV = "LERNSCOPE_CONFIG"
WEEKS_DIR_ENV = "LERNSCOPE_WEEKS_DIR"
LOGGER = logging.getLogger(__name__)


class IntakeContext(BaseModel):
    """Everything a host needs to serve submissions."""

    config: ReviewConfig
    registry: WeekRegistry
    intake: SubmissionIntake

    model_config = ConfigDict(arbitrary_types_allowed=True)


def _resolve_config(config_path: Path | None, repo_root: Path) -> ReviewConfig:
    env_override = os.getenv(CONFIG_ENV)
    if config_path is None and env_override:
        config_path = Path(env_override)
    if config_path is None:
        default_path = repo_root / DEFAULT_CONFIG_PATH
        if not default_path.exists():
            LOGGER.debug("No review config at %s; using defaults", default_path)
            return ReviewConfig()
        config_path = default_path
    return load_review_config(config_path, base_dir=repo_root)


def _anchor_paths(config: ReviewConfig, repo_root: Path) -> ReviewConfig:
    data_dir = config.registry.data_dir
    if data_dir is not None and not data_dir.is_absolute():
        registry_cfg = config.registry.model_copy(update={"data_dir": (repo_root / data_dir).resolve()})
        config = config.model_copy(update={"registry": registry_cfg})
    submissions_path = config.store.submissions_path
    if not submissions_path.is_absolute():
        store_cfg = config.store.model_copy(update={"submissions_path": (repo_root / submissions_path).resolve()})
        config = config.model_copy(update={"store": store_cfg})
    return config


def bootstrap_intake(
    config_path: Path | None = None,
    *,
    repo_root: Path | None = None,
    generator: ReviewGenerator | None = None,
    store: SubmissionStore | None = None,
    weeks_dir_override: Path | None = None,
    config: ReviewConfig | None = None,
) -> IntakeContext:
    """
    Load configuration and environment, then build the registry and intake service.

    Parameters
    ----------
    config_path:
        Review config YAML. Falls back to ``$LERNSCOPE_CONFIG`` and then
        ``<repo_root>/config/review.yaml``; defaults apply when none exists.
    repo_root:
        Base for relative paths and the ``.env`` file. Defaults to ``Path.cwd()``.
    generator:
        Review generation capability. Defaults to ``OfflineReviewGenerator``.
    store:
        Submission persistence capability. Defaults to a JSONL store at
        ``config.store.submissions_path`` (relative paths land under ``repo_root``).
    weeks_dir_override:
        Week data directory overriding config and ``$LERNSCOPE_WEEKS_DIR``.
    config:
        Ready-made configuration used instead of loading one. Its relative
        paths resolve against ``repo_root`` like those of a loaded file.
    """
    repo_root = (repo_root or Path.cwd()).resolve()
    load_dotenv(repo_root / ".env")

    if config is None:
        config = _resolve_config(config_path, repo_root)
    weeks_dir = weeks_dir_override or (Path(os.environ[WEEKS_DIR_ENV]) if os.getenv(WEEKS_DIR_ENV) else None)
    if weeks_dir is not None:
        registry_cfg = config.registry.model_copy(update={"data_dir": weeks_dir.expanduser().resolve()})
        config = config.model_copy(update={"registry": registry_cfg})
    config = _anchor_paths(config, repo_root)

    logging.getLogger("lernscope").setLevel(config.log_level)
    registry = build_registry(config.registry)
    intake = SubmissionIntake(
        registry=registry,
        generator=generator or OfflineReviewGenerator(),
        store=store or JsonlSubmissionStore(config.store.submissions_path),
    )
    return IntakeContext(config=config, registry=registry, intake=intake)


__all__ = ["IntakeContext", "bootstrap_intake"]
