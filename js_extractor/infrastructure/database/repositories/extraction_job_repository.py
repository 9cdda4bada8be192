"""SQLAlchemy implementation of the ExtractionJobRepository."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from js_extractor.application.interfaces.extraction_job_repository import ExtractionJobRepository
from js_extractor.domain.entities import (
    ExtractionJob,
    JobStatus,
    LogEntry,
    ScriptFile,
    ScriptFileStatus,
    clean_update_fields,
)
from js_extractor.domain.exceptions import EntityNotFoundError
from js_extractor.infrastructure.database.models import ExtractionJobModel, ScriptFileModel


class SQLAlchemyExtractionJobRepository(ExtractionJobRepository):
    """Concrete job store backed by SQLAlchemy (SQLite or PostgreSQL).

    Jobs run outside any request scope, so every call opens its own session
    and commits before returning; one call is one transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, source_url: str) -> ExtractionJob:
        job = ExtractionJob.for_url(source_url)
        job.id = str(uuid.uuid4())

        async with self._session_factory() as session:
            session.add(
                ExtractionJobModel(
                    id=job.id,
                    url=job.source_url,
                    domain=job.domain,
                    status=job.status.value,
                    total_files=job.total_files,
                    successful_files=job.successful_files,
                    failed_files=job.failed_files,
                    total_size=job.total_size,
                    logs=[],
                    created_at=job.created_at,
                    completed_at=None,
                )
            )
            await session.commit()
        return job

    async def get_by_id(self, job_id: str) -> ExtractionJob | None:
        async with self._session_factory() as session:
            model = await session.get(ExtractionJobModel, job_id)
            return self._job_to_domain(model) if model else None

    async def update(self, job_id: str, **fields: Any) -> ExtractionJob | None:
        fields = clean_update_fields(fields)

        async with self._session_factory() as session:
            model = await session.get(ExtractionJobModel, job_id)
            if model is None:
                return None

            for name, value in fields.items():
                if name == "status":
                    value = value.value
                elif name == "logs":
                    value = [entry.to_dict() for entry in value]
                setattr(model, name, value)

            await session.commit()
            return self._job_to_domain(model)

    async def get_recent(self, limit: int = 10) -> list[ExtractionJob]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ExtractionJobModel)
                .order_by(ExtractionJobModel.created_at.desc())
                .limit(limit)
            )
            return [self._job_to_domain(m) for m in result.scalars().all()]

    async def add_script_file(self, script_file: ScriptFile) -> ScriptFile:
        async with self._session_factory() as session:
            if await session.get(ExtractionJobModel, script_file.job_id) is None:
                raise EntityNotFoundError("ExtractionJob", script_file.job_id)

            count = await session.scalar(
                select(func.count())
                .select_from(ScriptFileModel)
                .where(ScriptFileModel.job_id == script_file.job_id)
            )
            model = ScriptFileModel(
                id=script_file.id or str(uuid.uuid4()),
                job_id=script_file.job_id,
                original_url=script_file.original_url,
                filename=script_file.filename,
                size=script_file.size,
                status=script_file.status.value,
                error_message=script_file.error_message,
                downloaded_at=script_file.downloaded_at,
                sequence=(count or 0) + 1,
            )
            session.add(model)
            await session.commit()
            return self._file_to_domain(model)

    async def get_script_files(self, job_id: str) -> list[ScriptFile]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ScriptFileModel)
                .where(ScriptFileModel.job_id == job_id)
                .order_by(ScriptFileModel.sequence.asc())
            )
            return [self._file_to_domain(m) for m in result.scalars().all()]

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _aware(value: datetime | None) -> datetime | None:
        """SQLite drops tzinfo; stored values are always UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def _job_to_domain(cls, model: ExtractionJobModel) -> ExtractionJob:
        return ExtractionJob(
            id=model.id,
            source_url=model.url,
            domain=model.domain,
            status=JobStatus(model.status),
            total_files=model.total_files,
            successful_files=model.successful_files,
            failed_files=model.failed_files,
            total_size=model.total_size,
            logs=[LogEntry.from_dict(entry) for entry in (model.logs or [])],
            created_at=cls._aware(model.created_at),
            completed_at=cls._aware(model.completed_at),
        )

    @classmethod
    def _file_to_domain(cls, model: ScriptFileModel) -> ScriptFile:
        return ScriptFile(
            id=model.id,
            job_id=model.job_id,
            original_url=model.original_url,
            filename=model.filename,
            size=model.size,
            status=ScriptFileStatus(model.status),
            error_message=model.error_message,
            downloaded_at=cls._aware(model.downloaded_at),
        )
