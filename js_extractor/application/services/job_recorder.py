"""Job recorder — writes a running job's timeline, counters and outcomes to the job store."""

import logging
from datetime import datetime, timezone
from typing import Any

from js_extractor.application.interfaces import ExtractionJobRepository
from js_extractor.domain.entities import (
    ExtractionJob,
    JobStatus,
    LogEntry,
    LogType,
    ScriptFile,
)

logger = logging.getLogger(__name__)


class JobRecorder:
    """Application service the extraction pipeline uses to persist its progress.

    Log appends are awaited in order so the stored timeline matches the
    order in which the pipeline emitted entries. A log append that cannot
    be applied is reported through ``logging`` and otherwise ignored; it
    never fails the extraction.
    """

    def __init__(self, repository: ExtractionJobRepository):
        self._repo = repository

    async def append_log(self, job_id: str, log_type: LogType, message: str) -> None:
        """Append one entry to the job's log (read, append, write back)."""
        entry = LogEntry.now(log_type, message)
        try:
            job = await self._repo.get_by_id(job_id)
            if job is None:
                logger.warning("Dropping log entry for unknown job %s: %s", job_id, message)
                return
            await self._repo.update(job_id, logs=[*job.logs, entry])
        except Exception:
            logger.exception("Could not append log entry to job %s", job_id)

    async def update_job(self, job_id: str, **fields: Any) -> ExtractionJob | None:
        """Merge ``fields`` into the job record; None when the job does not exist."""
        return await self._repo.update(job_id, **fields)

    async def record_outcome(self, script_file: ScriptFile) -> ScriptFile:
        """Persist the outcome of one download attempt."""
        return await self._repo.add_script_file(script_file)

    # ── Status transitions ───────────────────────────────────────────

    async def mark_processing(self, job_id: str) -> ExtractionJob | None:
        return await self._repo.update(job_id, status=JobStatus.PROCESSING)

    async def mark_completed(self, job_id: str, **counters: int) -> ExtractionJob | None:
        return await self._repo.update(
            job_id,
            status=JobStatus.COMPLETED,
            completed_at=datetime.now(timezone.utc),
            **counters,
        )

    async def mark_failed(self, job_id: str) -> ExtractionJob | None:
        """Fail the job; resources never attempted are counted as failed."""
        job = await self._repo.get_by_id(job_id)
        if job is None:
            return None
        return await self._repo.update(
            job_id,
            status=JobStatus.FAILED,
            failed_files=job.total_files - job.successful_files,
            completed_at=datetime.now(timezone.utc),
        )
