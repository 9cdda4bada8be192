from .extraction_job_repository import SQLAlchemyExtractionJobRepository
from .memory_job_repository import InMemoryExtractionJobRepository

__all__ = [
    "SQLAlchemyExtractionJobRepository",
    "InMemoryExtractionJobRepository",
]
