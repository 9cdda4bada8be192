from .extraction_job_repository import ExtractionJobRepository
from .resource_fetcher import ResourceFetcher

__all__ = [
    "ExtractionJobRepository",
    "ResourceFetcher",
]
