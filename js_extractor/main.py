"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from js_extractor.application.interfaces import ExtractionJobRepository
from js_extractor.application.services import (
    ExtractionRunner,
    ExtractionService,
    JobRecorder,
)
from js_extractor.config import Settings, get_settings
from js_extractor.infrastructure.database.repositories import (
    InMemoryExtractionJobRepository,
    SQLAlchemyExtractionJobRepository,
)
from js_extractor.infrastructure.database.session import (
    create_engine,
    create_session_factory,
    create_tables,
)
from js_extractor.infrastructure.http.resource_fetcher import HttpResourceFetcher
from js_extractor.infrastructure.logging.log_config import setup_logging
from js_extractor.infrastructure.storage.download_storage import DownloadStorage
from js_extractor.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _build_job_repository(
    settings: Settings,
) -> tuple[ExtractionJobRepository, AsyncEngine | None]:
    """Select the job store implementation configured by ``JOB_STORE``."""
    if not settings.uses_database:
        logger.info("Using in-memory job store")
        return InMemoryExtractionJobRepository(), None

    engine = create_engine(settings.database_url)
    await create_tables(engine)
    logger.info("Using database job store at %s", settings.database_url)
    return SQLAlchemyExtractionJobRepository(create_session_factory(engine)), engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — build the job store, fetcher and runner."""
    settings = get_settings()
    setup_logging()

    # 1. Job store
    repository, engine = await _build_job_repository(settings)

    # 2. Ensure download directory exists
    Path(settings.download_dir).mkdir(parents=True, exist_ok=True)
    storage = DownloadStorage(settings.download_dir)

    # 3. Shared HTTP client for page and script downloads
    http_client = httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True)
    fetcher = HttpResourceFetcher(
        user_agent=settings.user_agent,
        timeout=settings.request_timeout,
        http_client=http_client,
    )

    # 4. Extraction pipeline and background runner
    service = ExtractionService(
        recorder=JobRecorder(repository),
        fetcher=fetcher,
        storage=storage,
    )
    runner = ExtractionRunner(service)

    app.state.job_repository = repository
    app.state.download_storage = storage
    app.state.extraction_runner = runner

    yield

    # Shutdown
    await runner.stop(timeout=settings.shutdown_grace_seconds)
    await http_client.aclose()
    if engine is not None:
        await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "js_extractor.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
