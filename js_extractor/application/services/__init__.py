from .job_recorder import JobRecorder
from .extraction_service import ExtractionService
from .extraction_runner import ExtractionRunner
from .extraction_job_service import ExtractionJobService

__all__ = [
    "JobRecorder",
    "ExtractionService",
    "ExtractionRunner",
    "ExtractionJobService",
]
