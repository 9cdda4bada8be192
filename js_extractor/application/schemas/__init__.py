from .extraction_job import (
    CreateExtractionJobRequest,
    ExtractionJobDetailResponse,
    ExtractionJobResponse,
    ExtractionStatsResponse,
    LogEntryResponse,
    ScriptFileResponse,
)

__all__ = [
    "CreateExtractionJobRequest",
    "ExtractionJobDetailResponse",
    "ExtractionJobResponse",
    "ExtractionStatsResponse",
    "LogEntryResponse",
    "ScriptFileResponse",
]
