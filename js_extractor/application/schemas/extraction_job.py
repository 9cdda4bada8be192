"""Pydantic schemas for the extraction jobs API."""

from pydantic import BaseModel, Field

from js_extractor.domain.entities import JobStatus, LogType, ScriptFileStatus


class CreateExtractionJobRequest(BaseModel):
    """Request body for starting an extraction."""

    url: str = Field(min_length=1, max_length=2048, examples=["example.com"])


class LogEntryResponse(BaseModel):
    timestamp: str
    type: LogType
    message: str


class ScriptFileResponse(BaseModel):
    """Outcome of one script download."""

    id: str
    job_id: str
    original_url: str
    filename: str
    size: int | None = None
    status: ScriptFileStatus
    error_message: str | None = None
    downloaded_at: str


class ExtractionJobResponse(BaseModel):
    """Extraction job representation returned to clients."""

    id: str
    url: str
    domain: str
    status: JobStatus
    total_files: int
    successful_files: int
    failed_files: int
    total_size: int
    logs: list[LogEntryResponse]
    created_at: str
    completed_at: str | None = None


class ExtractionStatsResponse(BaseModel):
    """Derived summary for progress displays."""

    total_found: int
    successful: int
    failed: int
    total_size: str
    processing_time: str
    progress_percent: int


class ExtractionJobDetailResponse(ExtractionJobResponse):
    """A job with its recorded script files and derived statistics."""

    script_files: list[ScriptFileResponse]
    stats: ExtractionStatsResponse
