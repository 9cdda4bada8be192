"""FastAPI dependency injection — wires infrastructure to the application layer.

Long-lived collaborators (job store, runner, artifact storage) are built
once in the application lifespan and kept on ``app.state``; these providers
hand them to request handlers. Tests replace them via
``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from js_extractor.application.interfaces import ExtractionJobRepository
from js_extractor.application.services import ExtractionJobService, ExtractionRunner
from js_extractor.infrastructure.storage.download_storage import DownloadStorage


def get_job_repository(request: Request) -> ExtractionJobRepository:
    return request.app.state.job_repository


def get_extraction_runner(request: Request) -> ExtractionRunner:
    return request.app.state.extraction_runner


def get_download_storage(request: Request) -> DownloadStorage:
    return request.app.state.download_storage


async def get_extraction_job_service(
    repository: ExtractionJobRepository = Depends(get_job_repository),
    runner: ExtractionRunner = Depends(get_extraction_runner),
) -> AsyncGenerator[ExtractionJobService, None]:
    """Provides an ExtractionJobService bound to the shared job store and runner."""
    yield ExtractionJobService(repository, runner)
