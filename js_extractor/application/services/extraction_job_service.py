"""Application service (use case) for extraction job operations."""

from js_extractor.application.interfaces import ExtractionJobRepository
from js_extractor.application.services.extraction_runner import ExtractionRunner
from js_extractor.domain.entities import ExtractionJob, ScriptFile
from js_extractor.domain.exceptions import EntityNotFoundError


class ExtractionJobService:
    """Creates jobs, hands them to the runner and answers status queries."""

    def __init__(self, repository: ExtractionJobRepository, runner: ExtractionRunner):
        self._repository = repository
        self._runner = runner

    async def submit(self, url: str) -> ExtractionJob:
        """Create a pending job for ``url`` and start extracting it in the background.

        Raises InvalidSourceUrlError when the URL has no host.
        """
        job = await self._repository.create(url)
        self._runner.submit(job)
        return job

    async def get_job(self, job_id: str) -> ExtractionJob:
        job = await self._repository.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundError("ExtractionJob", job_id)
        return job

    async def list_recent(self, limit: int = 10) -> list[ExtractionJob]:
        return await self._repository.get_recent(limit=limit)

    async def list_script_files(self, job_id: str) -> list[ScriptFile]:
        await self.get_job(job_id)
        return await self._repository.get_script_files(job_id)
