"""Extraction runner — schedules extraction jobs as independent asyncio tasks."""

import asyncio
import logging

from js_extractor.application.services.extraction_service import ExtractionService
from js_extractor.domain.entities import ExtractionJob

logger = logging.getLogger(__name__)


class ExtractionRunner:
    """Runs each submitted job in its own task inside FastAPI's event loop.

    Jobs do not share state beyond the job store, so any number may run at
    once. On shutdown, running jobs get a grace period to finish before the
    remaining tasks are cancelled.
    """

    def __init__(self, service: ExtractionService) -> None:
        self._service = service
        self._tasks: set[asyncio.Task[None]] = set()

    def submit(self, job: ExtractionJob) -> asyncio.Task[None]:
        """Start extracting ``job`` in the background and return its task."""
        task = asyncio.create_task(
            self._service.extract(job.id, job.source_url),
            name=f"extraction-{job.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Submitted extraction job %s for %s", job.id, job.source_url)
        return task

    @property
    def running_count(self) -> int:
        return len(self._tasks)

    async def stop(self, timeout: float = 30.0) -> None:
        """Wait up to ``timeout`` seconds for running jobs, then cancel the rest."""
        if not self._tasks:
            return

        pending = set(self._tasks)
        logger.info("Waiting for %d running extraction job(s)", len(pending))
        _, still_running = await asyncio.wait(pending, timeout=timeout)

        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning("Cancelled %d unfinished extraction job(s)", len(still_running))

        logger.info("ExtractionRunner stopped")
