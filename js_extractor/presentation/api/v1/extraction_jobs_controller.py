"""Extraction Jobs API controller — submit extractions and poll their progress."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from js_extractor.application.schemas import (
    CreateExtractionJobRequest,
    ExtractionJobDetailResponse,
    ExtractionJobResponse,
    ExtractionStatsResponse,
    LogEntryResponse,
    ScriptFileResponse,
)
from js_extractor.application.services import ExtractionJobService
from js_extractor.config import get_settings
from js_extractor.domain.entities import ExtractionJob, JobStatus, ScriptFile
from js_extractor.domain.exceptions import EntityNotFoundError, InvalidSourceUrlError
from js_extractor.infrastructure.dependencies import get_extraction_job_service

router = APIRouter(prefix="/extraction-jobs", tags=["Extraction Jobs"])


# ── Helpers ──────────────────────────────────────────────────────────


def format_file_size(size: int | None) -> str:
    if not size:
        return "-"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _processing_time(job: ExtractionJob) -> str:
    end = job.completed_at or datetime.now(timezone.utc)
    return f"{(end - job.created_at).total_seconds():.1f}s"


def _progress_percent(job: ExtractionJob) -> int:
    if job.status.is_terminal:
        return 100
    if job.status == JobStatus.PROCESSING:
        if job.total_files > 0:
            done = job.successful_files + job.failed_files
            return round(done / job.total_files * 100)
        return 25
    return 0


def _job_to_response(job: ExtractionJob) -> ExtractionJobResponse:
    """Map an ExtractionJob domain entity to its API response."""
    return ExtractionJobResponse(
        id=job.id,
        url=job.source_url,
        domain=job.domain,
        status=job.status,
        total_files=job.total_files,
        successful_files=job.successful_files,
        failed_files=job.failed_files,
        total_size=job.total_size,
        logs=[
            LogEntryResponse(timestamp=e.timestamp, type=e.type, message=e.message)
            for e in job.logs
        ],
        created_at=job.created_at.isoformat(),
        completed_at=job.completed_at.isoformat() if job.completed_at else None,
    )


def _file_to_response(script_file: ScriptFile) -> ScriptFileResponse:
    return ScriptFileResponse(
        id=script_file.id,
        job_id=script_file.job_id,
        original_url=script_file.original_url,
        filename=script_file.filename,
        size=script_file.size,
        status=script_file.status,
        error_message=script_file.error_message,
        downloaded_at=script_file.downloaded_at.isoformat(),
    )


def _job_to_detail(job: ExtractionJob, script_files: list[ScriptFile]) -> ExtractionJobDetailResponse:
    base = _job_to_response(job)
    return ExtractionJobDetailResponse(
        **base.model_dump(),
        script_files=[_file_to_response(f) for f in script_files],
        stats=ExtractionStatsResponse(
            total_found=job.total_files,
            successful=job.successful_files,
            failed=job.failed_files,
            total_size=format_file_size(job.total_size),
            processing_time=_processing_time(job),
            progress_percent=_progress_percent(job),
        ),
    )


# ── Endpoints ────────────────────────────────────────────────────────


@router.post("", response_model=ExtractionJobResponse, status_code=status.HTTP_201_CREATED)
async def create_extraction_job(
    request: CreateExtractionJobRequest,
    service: ExtractionJobService = Depends(get_extraction_job_service),
) -> ExtractionJobResponse:
    """Create an extraction job and start it in the background."""
    if not request.url.strip():
        raise HTTPException(status_code=400, detail="URL must not be blank")
    try:
        job = await service.submit(request.url)
    except InvalidSourceUrlError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _job_to_response(job)


@router.get("", response_model=list[ExtractionJobResponse])
async def list_recent_jobs(
    limit: int | None = Query(None, ge=1, le=100),
    service: ExtractionJobService = Depends(get_extraction_job_service),
) -> list[ExtractionJobResponse]:
    """List the most recently created jobs, newest first."""
    jobs = await service.list_recent(limit=limit or get_settings().recent_jobs_limit)
    return [_job_to_response(j) for j in jobs]


@router.get("/{job_id}", response_model=ExtractionJobDetailResponse)
async def get_extraction_job(
    job_id: str,
    service: ExtractionJobService = Depends(get_extraction_job_service),
) -> ExtractionJobDetailResponse:
    """Get a job with its script files and progress statistics."""
    try:
        job = await service.get_job(job_id)
        script_files = await service.list_script_files(job_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _job_to_detail(job, script_files)


@router.get("/{job_id}/files", response_model=list[ScriptFileResponse])
async def list_job_files(
    job_id: str,
    service: ExtractionJobService = Depends(get_extraction_job_service),
) -> list[ScriptFileResponse]:
    """List the download outcomes recorded for a job."""
    try:
        script_files = await service.list_script_files(job_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [_file_to_response(f) for f in script_files]
