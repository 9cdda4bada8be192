from .extraction_job import (
    ExtractionJob,
    JobStatus,
    LogEntry,
    LogType,
    UPDATABLE_FIELDS,
    clean_update_fields,
    domain_of,
    normalize_source_url,
)
from .script_file import ScriptFile, ScriptFileStatus
from .fetch_result import (
    FetchedResource,
    FetchFailure,
    FetchResult,
    HttpStatusFailure,
    TransportFailure,
)

__all__ = [
    "ExtractionJob",
    "JobStatus",
    "LogEntry",
    "LogType",
    "UPDATABLE_FIELDS",
    "clean_update_fields",
    "domain_of",
    "normalize_source_url",
    "ScriptFile",
    "ScriptFileStatus",
    "FetchedResource",
    "FetchFailure",
    "FetchResult",
    "HttpStatusFailure",
    "TransportFailure",
]
