"""Extraction service — orchestrates the script extraction pipeline for one job.

Pipeline:
    1. Mark the job processing and normalize the requested URL
    2. Create the per-domain download directory
    3. Fetch the page and store it as ``page.html``
    4. Discover external ``.js`` references
    5. Download each script in discovery order, recording one outcome each
    6. Write ``all_js_combined.txt`` and ``manifest.txt``
    7. Mark the job completed with final counters

A failed script download never stops the loop. Anything else that goes
wrong fails the whole job.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from js_extractor.application.interfaces import ResourceFetcher
from js_extractor.application.services.job_recorder import JobRecorder
from js_extractor.domain.entities import (
    FetchedResource,
    FetchFailure,
    HttpStatusFailure,
    LogType,
    ScriptFile,
    domain_of,
    normalize_source_url,
)
from js_extractor.domain.exceptions import PipelineError
from js_extractor.domain.filenames import failed_filename, local_filename
from js_extractor.infrastructure.extractors.script_discoverer import discover_script_urls
from js_extractor.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from js_extractor.infrastructure.storage.download_storage import (
    COMBINED_FILENAME,
    MANIFEST_FILENAME,
    PAGE_FILENAME,
    DownloadStorage,
)

logger = logging.getLogger(__name__)
plog = PipelineLogger("ExtractionService")

DELIMITER = "=" * 80

ScriptDiscoverer = Callable[[str, str], list[str]]


class _ExtractionReport:
    """Accumulates the combined artifact and the manifest in discovery order."""

    def __init__(self, source_url: str, total: int):
        self._combined: list[str] = []
        self._manifest: list[str] = [
            f"Source page: {source_url}\n",
            f"Number of .js files: {total}\n",
            "\n",
        ]

    def _section_header(self, index: int, url: str, status: str | int) -> None:
        self._combined.append(
            f"{DELIMITER}\n"
            f"# FILE {index}: {url}\n"
            f"# HTTP STATUS: {status}\n"
            f"{DELIMITER}\n\n"
        )

    def add_success(self, index: int, url: str, filename: str, resource: FetchedResource) -> None:
        self._section_header(index, url, resource.status_code)
        text = resource.text
        self._combined.append(text)
        if not text.endswith("\n"):
            self._combined.append("\n")
        self._combined.append("\n\n")
        self._manifest.append(f"{index}\t{url}\tOK\t{filename}\n")

    def add_failure(self, index: int, url: str, failure: FetchFailure) -> None:
        self._section_header(index, url, failure.status_label)
        self._combined.append(f"/* ERROR fetching file: {failure.message} */\n\n")
        self._manifest.append(f"{index}\t{url}\tERROR\t{failure.message}\n")

    @property
    def combined(self) -> str:
        return "".join(self._combined)

    @property
    def manifest(self) -> str:
        return "".join(self._manifest)


def _describe_error(error: BaseException) -> str:
    """Best-effort message for a fault that escaped the pipeline steps."""
    return str(error) or "Unknown error occurred"


def _page_failure_message(failure: FetchFailure, url: str) -> str:
    if isinstance(failure, HttpStatusFailure):
        return f"{failure.message} when fetching: {url}"
    return failure.message


class ExtractionService:
    """Application service that runs one extraction job end to end.

    ``extract`` only re-raises task cancellation: every outcome, including
    failure of the whole job, is reported through the job's status, counters
    and log.
    """

    def __init__(
        self,
        recorder: JobRecorder,
        fetcher: ResourceFetcher,
        storage: DownloadStorage,
        discover: ScriptDiscoverer = discover_script_urls,
    ):
        self._recorder = recorder
        self._fetcher = fetcher
        self._storage = storage
        self._discover = discover

    async def extract(self, job_id: str, url: str) -> None:
        """Run the pipeline for ``job_id``, then leave it completed or failed.

        A cancelled run is still marked failed before the cancellation
        propagates.
        """
        plog.separator(f"Job {job_id}")
        start = time.monotonic()
        try:
            await self._run(job_id, url)
        except asyncio.CancelledError:
            plog.step_error(PipelineStage.ERROR, f"Extraction cancelled for {url}")
            await asyncio.shield(self._record_failure(job_id, "cancelled"))
            raise
        except Exception as exc:
            plog.step_error(PipelineStage.ERROR, f"Extraction failed for {url}", error=exc)
            await self._record_failure(job_id, _describe_error(exc))
        finally:
            plog.stats(job_id=job_id, elapsed=f"{time.monotonic() - start:.2f}s")

    async def _record_failure(self, job_id: str, message: str) -> None:
        await self._recorder.append_log(job_id, LogType.ERROR, f"Extraction failed: {message}")
        try:
            await self._recorder.mark_failed(job_id)
        except Exception:
            logger.exception("Could not mark job %s as failed", job_id)

    # ── Internal Pipeline ────────────────────────────────────────────

    async def _run(self, job_id: str, url: str) -> None:
        log = self._recorder.append_log

        if await self._recorder.mark_processing(job_id) is None:
            logger.warning("Extraction requested for unknown job %s", job_id)
            return
        await log(job_id, LogType.INFO, f"Starting extraction for: {url}")

        url = normalize_source_url(url)
        domain = domain_of(url)
        output_dir = self._storage.ensure_domain_dir(domain)
        await log(job_id, LogType.INFO, f"Created download directory: {output_dir}")

        # ── Page ─────────────────────────────────────────────────────
        plog.step_start(PipelineStage.PAGE, f"Fetching {url}")
        await log(job_id, LogType.INFO, f"Fetching page: {url}")
        page = await self._fetcher.fetch(url)
        if isinstance(page, FetchFailure):
            raise PipelineError(_page_failure_message(page, url))

        page_path = await self._storage.write_bytes(domain, PAGE_FILENAME, page.content)
        plog.step_complete(PipelineStage.PAGE, f"Saved {page_path}", size_bytes=page.size)
        await log(job_id, LogType.SUCCESS, f"Saved page HTML → {page_path}")

        # ── Discovery ────────────────────────────────────────────────
        script_urls = self._discover(page.text, url)
        total = len(script_urls)
        plog.step_complete(PipelineStage.DISCOVERY, f"Found {total} script(s)")

        if total == 0:
            await log(job_id, LogType.INFO, "No external .js files found.")
            await self._recorder.mark_completed(job_id, total_files=0)
            plog.step_complete(PipelineStage.COMPLETE, "Nothing to download", domain=domain)
            return

        await log(job_id, LogType.SUCCESS, f"Found {total} .js files. Downloading...")
        await self._recorder.update_job(job_id, total_files=total)

        # ── Downloads ────────────────────────────────────────────────
        report = _ExtractionReport(url, total)
        successful = 0
        total_size = 0

        for index, script_url in enumerate(script_urls, 1):
            await log(job_id, LogType.PROGRESS, f"[{index}/{total}] {script_url}")
            result = await self._fetcher.fetch(script_url)

            if isinstance(result, FetchedResource):
                filename = local_filename(index, script_url)
                await self._storage.write_bytes(domain, filename, result.content)
                await self._recorder.record_outcome(
                    ScriptFile.success(job_id, script_url, filename, result.size)
                )
                report.add_success(index, script_url, filename, result)
                successful += 1
                total_size += result.size
                plog.detail(f"[{index}/{total}] {filename}", size_bytes=result.size)
                await log(job_id, LogType.SUCCESS, f"    Saved → {filename}")
            else:
                await self._recorder.record_outcome(
                    ScriptFile.failure(job_id, script_url, failed_filename(index), result.message)
                )
                report.add_failure(index, script_url, result)
                plog.step_error(PipelineStage.DOWNLOAD, f"[{index}/{total}] {script_url}: {result.message}")
                await log(job_id, LogType.ERROR, f"    Error: {result.message}")

            await self._recorder.update_job(
                job_id,
                successful_files=successful,
                failed_files=index - successful,
                total_size=total_size,
            )

        # ── Artifacts ────────────────────────────────────────────────
        await self._storage.write_text(domain, COMBINED_FILENAME, report.combined)
        await self._storage.write_text(domain, MANIFEST_FILENAME, report.manifest)
        plog.step_complete(PipelineStage.ARTIFACTS, f"Wrote {COMBINED_FILENAME} and {MANIFEST_FILENAME}")

        await self._recorder.mark_completed(
            job_id,
            successful_files=successful,
            failed_files=total - successful,
            total_size=total_size,
        )
        plog.step_complete(
            PipelineStage.COMPLETE,
            f"Done: {output_dir}",
            successful=successful,
            failed=total - successful,
            total_size=total_size,
        )
        await log(job_id, LogType.SUCCESS, f"Done. Files saved in {output_dir}")
