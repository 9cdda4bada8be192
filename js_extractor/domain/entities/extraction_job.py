"""Domain entity for extraction jobs — one end-to-end script extraction run."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from js_extractor.domain.exceptions import InvalidSourceUrlError

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


class JobStatus(str, Enum):
    """Lifecycle states of an extraction job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class LogType(str, Enum):
    """Kinds of entries in a job's timeline."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    PROGRESS = "progress"


@dataclass(frozen=True)
class LogEntry:
    """A single immutable line in a job's log."""

    timestamp: str
    type: LogType
    message: str

    @classmethod
    def now(cls, log_type: LogType, message: str) -> "LogEntry":
        return cls(
            timestamp=datetime.now(timezone.utc).isoformat(),
            type=LogType(log_type),
            message=message,
        )

    def to_dict(self) -> dict[str, str]:
        return {"timestamp": self.timestamp, "type": self.type.value, "message": self.message}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "LogEntry":
        return cls(
            timestamp=data["timestamp"],
            type=LogType(data["type"]),
            message=data["message"],
        )


def normalize_source_url(url: str) -> str:
    """Prefix ``https://`` when the URL carries no scheme."""
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = f"https://{url}"
    return url


def domain_of(url: str) -> str:
    """Return the host component of an absolute URL.

    Raises InvalidSourceUrlError when the URL cannot be parsed or has no host.
    """
    try:
        host = urlsplit(url).hostname
    except ValueError as exc:
        raise InvalidSourceUrlError(url, str(exc)) from exc
    if not host:
        raise InvalidSourceUrlError(url, "no host component")
    return host


@dataclass
class ExtractionJob:
    """One extraction run for a single requested page.

    Counters only grow while the job is processing and are frozen once it
    reaches a terminal state. ``logs`` is append-only.
    """

    source_url: str
    domain: str
    id: str | None = None
    status: JobStatus = JobStatus.PENDING
    total_files: int = 0
    successful_files: int = 0
    failed_files: int = 0
    total_size: int = 0
    logs: list[LogEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @classmethod
    def for_url(cls, url: str) -> "ExtractionJob":
        """Build a pending job from a user-supplied URL."""
        source_url = normalize_source_url(url)
        return cls(source_url=source_url, domain=domain_of(source_url))


# Fields the job store accepts in partial updates.
UPDATABLE_FIELDS = frozenset({
    "status",
    "total_files",
    "successful_files",
    "failed_files",
    "total_size",
    "logs",
    "completed_at",
})


def clean_update_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial job update and coerce its values to domain types.

    Raises ValueError for fields that are not updatable.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update job fields: {sorted(unknown)}")

    cleaned = dict(fields)
    if "status" in cleaned:
        cleaned["status"] = JobStatus(cleaned["status"])
    if "logs" in cleaned:
        cleaned["logs"] = list(cleaned["logs"])
    return cleaned
