"""Append-only JSONL log of reviewed submissions."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, Field


class SubmissionRecord(BaseModel):
    """One persisted submission together with the scope that governed its review."""

    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    first_name: str
    last_name: str
    student_name: str
    email: str | None = None
    level: str = Field(..., description="Student-facing course slug, e.g. 'aleman1'.")
    week_id: str = Field(..., description="Zero-padded week token, e.g. 'w01'.")
    session_id: str = Field(..., description="'<level>-<week_id>', e.g. 'aleman1-w01'.")
    content: str
    feedback: str
    scope: Dict[str, Any] = Field(default_factory=dict, description="Scope snapshot active at review time.")
    submission_type: str = "written"
    activity_mode: str = "guided"


class JsonlSubmissionStore:
    """Write each submission as one JSON line."""

    def __init__(self, output_path: Path):
        self.output_path = output_path
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def save(self, record: SubmissionRecord | Dict[str, Any]) -> SubmissionRecord:
        """Append a record to disk and return the normalized object."""
        if not isinstance(record, SubmissionRecord):
            record = SubmissionRecord(**record)
        line = record.model_dump_json()
        with self._lock:
            with self.output_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        return record

    def extend(self, records: Iterable[SubmissionRecord | Dict[str, Any]]) -> None:
        for record in records:
            self.save(record)

    def read_all(self) -> List[SubmissionRecord]:
        if not self.output_path.exists():
            return []
        records = []
        with self.output_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if line.strip():
                    records.append(SubmissionRecord.model_validate(json.loads(line)))
        return records


__all__ = ["JsonlSubmissionStore", "SubmissionRecord"]
