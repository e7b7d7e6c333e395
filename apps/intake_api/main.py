from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from lernscope import get_version
from lernscope.core.errors import ConfigurationFault
from lernscope.pipeline import IntakeContext, SubmissionInput, bootstrap_intake
from lernscope.weeks.registry import WeekNotFound, WeekSummary

REPO_ROOT = Path(__file__).resolve().parents[2]
LOGGER = logging.getLogger(__name__)


@lru_cache
def get_intake_context() -> IntakeContext:
    repo_root = os.getenv("LERNSCOPE_REPO_ROOT")
    return bootstrap_intake(repo_root=Path(repo_root).expanduser().resolve() if repo_root else REPO_ROOT)


class HealthResponse(BaseModel):
    status: str
    registered_weeks: int


class CourseWeeks(BaseModel):
    course: str
    weeks: List[int] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    message: str
    feedback: str
    session_id: str
    scope: Dict[str, Any]


app = FastAPI(title="Lernscope Intake API", version=get_version())
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health(ctx: IntakeContext = Depends(get_intake_context)) -> HealthResponse:
    return HealthResponse(status="ok", registered_weeks=len(ctx.registry))


@app.get("/courses", response_model=List[CourseWeeks])
def list_courses(ctx: IntakeContext = Depends(get_intake_context)) -> List[CourseWeeks]:
    courses = sorted(ctx.registry.list_courses(), key=lambda level: level.value)
    return [CourseWeeks(course=course.value, weeks=list(ctx.registry.list_weeks(course))) for course in courses]


@app.get("/courses/{course}/weeks", response_model=CourseWeeks)
def list_weeks(course: str, ctx: IntakeContext = Depends(get_intake_context)) -> CourseWeeks:
    weeks = ctx.registry.list_weeks(course)
    if not weeks:
        raise HTTPException(status_code=404, detail=f"No weeks registered for course '{course}'")
    return CourseWeeks(course=course, weeks=list(weeks))


@app.get("/courses/{course}/weeks/{week}", response_model=WeekSummary)
def get_week(course: str, week: str, ctx: IntakeContext = Depends(get_intake_context)) -> WeekSummary:
    summary = ctx.registry.summarize(course, week)
    if isinstance(summary, WeekNotFound):
        raise HTTPException(status_code=404, detail=f"Week not found ({summary.reason})")
    return summary


@app.post("/submissions", response_model=SubmissionResponse)
def create_submission(body: Dict[str, Any], ctx: IntakeContext = Depends(get_intake_context)) -> SubmissionResponse:
    try:
        submission = SubmissionInput.model_validate(body)
    except ValidationError as exc:
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]} for error in exc.errors()
        ]
        raise HTTPException(status_code=400, detail={"error": "Datos inválidos", "details": details}) from exc

    try:
        outcome = ctx.intake.submit(submission)
    except ConfigurationFault as exc:
        LOGGER.warning("Rejected submission for %s/%s: %s", submission.level, submission.week, exc)
        status = 404 if exc.reason == "unknown_week" else 422
        raise HTTPException(status_code=status, detail={"error": str(exc), "reason": exc.reason}) from exc

    return SubmissionResponse(
        message="Actividad recibida correctamente",
        feedback=outcome.feedback,
        session_id=outcome.record.session_id,
        scope=outcome.record.scope,
    )
