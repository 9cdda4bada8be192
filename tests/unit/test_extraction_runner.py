"""Unit tests for the ExtractionRunner."""

import asyncio

import pytest

from js_extractor.application.interfaces import ResourceFetcher
from js_extractor.application.services import ExtractionRunner, ExtractionService, JobRecorder
from js_extractor.domain.entities import ExtractionJob, JobStatus, LogType
from js_extractor.infrastructure.database.repositories import InMemoryExtractionJobRepository
from js_extractor.infrastructure.storage.download_storage import DownloadStorage


class FakeExtractionService:
    """Records calls; jobs for ``blocked`` URLs wait until released."""

    def __init__(self, blocked: set[str] | None = None):
        self.calls: list[tuple[str, str]] = []
        self.cancelled: list[str] = []
        self.release = asyncio.Event()
        self._blocked = blocked or set()

    async def extract(self, job_id: str, url: str) -> None:
        self.calls.append((job_id, url))
        if url in self._blocked:
            try:
                await self.release.wait()
            except asyncio.CancelledError:
                self.cancelled.append(job_id)
                raise


class HangingFetcher(ResourceFetcher):
    """Never answers within a test's lifetime."""

    async def fetch(self, url: str):
        await asyncio.sleep(3600)


def _job(job_id: str, url: str) -> ExtractionJob:
    job = ExtractionJob.for_url(url)
    job.id = job_id
    return job


@pytest.mark.asyncio
async def test_submitted_jobs_run_concurrently():
    service = FakeExtractionService(blocked={"https://slow.test"})
    runner = ExtractionRunner(service)

    slow = runner.submit(_job("1", "slow.test"))
    fast = runner.submit(_job("2", "fast.test"))
    await fast

    assert ("2", "https://fast.test") in service.calls
    assert not slow.done()
    assert runner.running_count == 1

    service.release.set()
    await slow
    assert runner.running_count == 0


@pytest.mark.asyncio
async def test_stop_waits_for_jobs_that_finish_in_time():
    service = FakeExtractionService(blocked={"https://slow.test"})
    runner = ExtractionRunner(service)
    task = runner.submit(_job("1", "slow.test"))
    await asyncio.sleep(0)

    asyncio.get_running_loop().call_later(0.01, service.release.set)
    await runner.stop(timeout=5)

    assert task.done() and not task.cancelled()
    assert service.cancelled == []


@pytest.mark.asyncio
async def test_stop_cancels_jobs_after_grace_period():
    service = FakeExtractionService(blocked={"https://slow.test"})
    runner = ExtractionRunner(service)
    task = runner.submit(_job("1", "slow.test"))
    await asyncio.sleep(0)

    await runner.stop(timeout=0.01)

    assert task.cancelled()
    assert service.cancelled == ["1"]
    assert runner.running_count == 0


@pytest.mark.asyncio
async def test_job_cancelled_at_shutdown_ends_failed(tmp_path):
    repo = InMemoryExtractionJobRepository()
    service = ExtractionService(JobRecorder(repo), HangingFetcher(), DownloadStorage(tmp_path))
    runner = ExtractionRunner(service)
    job = await repo.create("example.com")

    task = runner.submit(job)
    await asyncio.sleep(0.01)
    await runner.stop(timeout=0.01)

    stored = await repo.get_by_id(job.id)
    assert task.cancelled()
    assert stored.status == JobStatus.FAILED
    assert stored.completed_at is not None
    assert stored.logs[-1].type == LogType.ERROR
    assert stored.logs[-1].message == "Extraction failed: cancelled"
