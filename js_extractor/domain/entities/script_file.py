"""Domain entity for the recorded outcome of one script download attempt."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ScriptFileStatus(str, Enum):
    """Outcome of a single download attempt.

    TIMEOUT is part of the stored vocabulary but the pipeline reports
    timeouts as FAILED.
    """

    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass
class ScriptFile:
    """One attempted script download, created once and never mutated."""

    job_id: str
    original_url: str
    filename: str
    status: ScriptFileStatus
    size: int | None = None
    error_message: str | None = None
    id: str | None = None
    downloaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success(cls, job_id: str, url: str, filename: str, size: int) -> "ScriptFile":
        return cls(
            job_id=job_id,
            original_url=url,
            filename=filename,
            status=ScriptFileStatus.SUCCESS,
            size=size,
        )

    @classmethod
    def failure(cls, job_id: str, url: str, filename: str, error_message: str) -> "ScriptFile":
        return cls(
            job_id=job_id,
            original_url=url,
            filename=filename,
            status=ScriptFileStatus.FAILED,
            error_message=error_message,
        )
