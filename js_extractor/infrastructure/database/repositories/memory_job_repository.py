"""In-memory implementation of the ExtractionJobRepository.

Used as the default job store and in tests. Each instance is independent;
records live only as long as the instance.
"""

import asyncio
import uuid
from dataclasses import replace
from typing import Any

from js_extractor.application.interfaces.extraction_job_repository import ExtractionJobRepository
from js_extractor.domain.entities import ExtractionJob, ScriptFile, clean_update_fields
from js_extractor.domain.exceptions import EntityNotFoundError


def _snapshot(job: ExtractionJob) -> ExtractionJob:
    """Copy handed to callers so they cannot mutate the stored record."""
    return replace(job, logs=list(job.logs))


class InMemoryExtractionJobRepository(ExtractionJobRepository):
    """Dict-backed job store; all mutations happen under one asyncio.Lock."""

    def __init__(self) -> None:
        self._jobs: dict[str, ExtractionJob] = {}
        self._script_files: dict[str, ScriptFile] = {}
        self._lock = asyncio.Lock()

    async def create(self, source_url: str) -> ExtractionJob:
        job = ExtractionJob.for_url(source_url)
        job.id = str(uuid.uuid4())
        async with self._lock:
            self._jobs[job.id] = job
        return _snapshot(job)

    async def get_by_id(self, job_id: str) -> ExtractionJob | None:
        job = self._jobs.get(job_id)
        return _snapshot(job) if job else None

    async def update(self, job_id: str, **fields: Any) -> ExtractionJob | None:
        fields = clean_update_fields(fields)
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            updated = replace(job, **fields)
            self._jobs[job_id] = updated
        return _snapshot(updated)

    async def get_recent(self, limit: int = 10) -> list[ExtractionJob]:
        # Newest insertion first so equal timestamps keep creation order.
        jobs = sorted(
            reversed(list(self._jobs.values())),
            key=lambda j: j.created_at,
            reverse=True,
        )
        return [_snapshot(j) for j in jobs[:limit]]

    async def add_script_file(self, script_file: ScriptFile) -> ScriptFile:
        async with self._lock:
            if script_file.job_id not in self._jobs:
                raise EntityNotFoundError("ExtractionJob", script_file.job_id)
            stored = replace(script_file, id=script_file.id or str(uuid.uuid4()))
            self._script_files[stored.id] = stored
        return replace(stored)

    async def get_script_files(self, job_id: str) -> list[ScriptFile]:
        return [replace(f) for f in self._script_files.values() if f.job_id == job_id]
