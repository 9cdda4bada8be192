"""Unit tests for the ExtractionService pipeline."""

import pytest

from js_extractor.application.interfaces import ResourceFetcher
from js_extractor.application.services import ExtractionService, JobRecorder
from js_extractor.domain.entities import (
    FetchedResource,
    HttpStatusFailure,
    JobStatus,
    LogType,
    ScriptFileStatus,
    TransportFailure,
)
from js_extractor.infrastructure.database.repositories import InMemoryExtractionJobRepository
from js_extractor.infrastructure.storage.download_storage import DownloadStorage

DELIMITER = "=" * 80
PAGE_URL = "https://example.com"


# ── Fakes ──


class FakeFetcher(ResourceFetcher):
    """Serves canned results by URL and records request order."""

    def __init__(self, responses: dict):
        self._responses = responses
        self.requested: list[str] = []

    async def fetch(self, url: str):
        self.requested.append(url)
        result = self._responses.get(url)
        if result is None:
            return TransportFailure("getaddrinfo ENOTFOUND")
        if isinstance(result, Exception):
            raise result
        return result


def _ok(url: str, body: str) -> FetchedResource:
    return FetchedResource(url=url, status_code=200, content=body.encode(), encoding="utf-8")


def _page(*srcs: str) -> FetchedResource:
    scripts = "".join(f'<script src="{s}"></script>' for s in srcs)
    return _ok(PAGE_URL, f"<html><head>{scripts}</head><body></body></html>")


async def _run(tmp_path, responses: dict, url: str = "example.com"):
    repo = InMemoryExtractionJobRepository()
    fetcher = FakeFetcher(responses)
    storage = DownloadStorage(tmp_path)
    service = ExtractionService(JobRecorder(repo), fetcher, storage)

    job = await repo.create(url)
    await service.extract(job.id, job.source_url)

    stored = await repo.get_by_id(job.id)
    files = await repo.get_script_files(job.id)
    return stored, files, fetcher


# ── Tests ──


@pytest.mark.asyncio
async def test_downloads_every_script_and_writes_artifacts(tmp_path):
    responses = {
        PAGE_URL: _page("/a.js", "lib/b.js"),
        "https://example.com/a.js": _ok("https://example.com/a.js", "var a = 1;"),
        "https://example.com/lib/b.js": _ok("https://example.com/lib/b.js", "var b = 2;\n"),
    }

    job, files, fetcher = await _run(tmp_path, responses)

    assert job.status == JobStatus.COMPLETED
    assert job.completed_at is not None
    assert (job.total_files, job.successful_files, job.failed_files) == (2, 2, 0)
    assert job.total_size == len("var a = 1;") + len("var b = 2;\n")
    assert fetcher.requested == [PAGE_URL, "https://example.com/a.js", "https://example.com/lib/b.js"]

    out = tmp_path / "example.com"
    assert (out / "page.html").read_bytes() == responses[PAGE_URL].content
    assert (out / "001_a.js").read_text() == "var a = 1;"
    assert (out / "002_b.js").read_text() == "var b = 2;\n"
    assert [(f.filename, f.status, f.size) for f in files] == [
        ("001_a.js", ScriptFileStatus.SUCCESS, 10),
        ("002_b.js", ScriptFileStatus.SUCCESS, 11),
    ]

    combined = (out / "all_js_combined.txt").read_text()
    assert combined == (
        f"{DELIMITER}\n# FILE 1: https://example.com/a.js\n# HTTP STATUS: 200\n{DELIMITER}\n\n"
        "var a = 1;\n\n\n"
        f"{DELIMITER}\n# FILE 2: https://example.com/lib/b.js\n# HTTP STATUS: 200\n{DELIMITER}\n\n"
        "var b = 2;\n\n\n"
    )

    manifest = (out / "manifest.txt").read_text()
    assert manifest == (
        "Source page: https://example.com\n"
        "Number of .js files: 2\n"
        "\n"
        "1\thttps://example.com/a.js\tOK\t001_a.js\n"
        "2\thttps://example.com/lib/b.js\tOK\t002_b.js\n"
    )


@pytest.mark.asyncio
async def test_failed_script_does_not_stop_the_job(tmp_path):
    responses = {
        PAGE_URL: _page("/a.js", "/b.js", "/c.js"),
        "https://example.com/a.js": _ok("https://example.com/a.js", "A"),
        "https://example.com/b.js": HttpStatusFailure(404, "Not Found"),
        "https://example.com/c.js": _ok("https://example.com/c.js", "C"),
    }

    job, files, _ = await _run(tmp_path, responses)

    assert job.status == JobStatus.COMPLETED
    assert (job.total_files, job.successful_files, job.failed_files) == (3, 2, 1)
    assert job.total_size == 2
    assert [(f.filename, f.status, f.error_message) for f in files] == [
        ("001_a.js", ScriptFileStatus.SUCCESS, None),
        ("failed_2.js", ScriptFileStatus.FAILED, "HTTP 404 - Not Found"),
        ("003_c.js", ScriptFileStatus.SUCCESS, None),
    ]

    out = tmp_path / "example.com"
    assert not (out / "failed_2.js").exists()
    combined = (out / "all_js_combined.txt").read_text()
    assert "# HTTP STATUS: HTTP 404\n" in combined
    assert "/* ERROR fetching file: HTTP 404 - Not Found */\n\n" in combined
    assert combined.index("# FILE 1:") < combined.index("# FILE 2:") < combined.index("# FILE 3:")

    manifest_lines = (out / "manifest.txt").read_text().splitlines()
    assert manifest_lines[3:] == [
        "1\thttps://example.com/a.js\tOK\t001_a.js",
        "2\thttps://example.com/b.js\tERROR\tHTTP 404 - Not Found",
        "3\thttps://example.com/c.js\tOK\t003_c.js",
    ]


@pytest.mark.asyncio
async def test_transport_failure_is_recorded_with_reason(tmp_path):
    responses = {
        PAGE_URL: _page("https://cdn.test/x.js"),
        "https://cdn.test/x.js": TransportFailure("timeout of 20000ms exceeded"),
    }

    job, files, _ = await _run(tmp_path, responses)

    assert job.status == JobStatus.COMPLETED
    assert (job.successful_files, job.failed_files) == (0, 1)
    assert files[0].status == ScriptFileStatus.FAILED
    assert files[0].error_message == "timeout of 20000ms exceeded"
    combined = (tmp_path / "example.com" / "all_js_combined.txt").read_text()
    assert "# HTTP STATUS: ERROR\n" in combined


@pytest.mark.asyncio
async def test_page_without_scripts_completes_with_zero_counters(tmp_path):
    job, files, _ = await _run(tmp_path, {PAGE_URL: _page()})

    assert job.status == JobStatus.COMPLETED
    assert (job.total_files, job.successful_files, job.failed_files, job.total_size) == (0, 0, 0, 0)
    assert files == []
    assert job.logs[-1].message == "No external .js files found."

    out = tmp_path / "example.com"
    assert (out / "page.html").exists()
    assert not (out / "all_js_combined.txt").exists()
    assert not (out / "manifest.txt").exists()


@pytest.mark.asyncio
async def test_page_http_failure_fails_the_job(tmp_path):
    responses = {PAGE_URL: HttpStatusFailure(500, "Internal Server Error")}

    job, files, fetcher = await _run(tmp_path, responses)

    assert job.status == JobStatus.FAILED
    assert job.completed_at is not None
    assert files == []
    assert fetcher.requested == [PAGE_URL]
    assert job.logs[-1].type == LogType.ERROR
    assert job.logs[-1].message == (
        "Extraction failed: HTTP 500 - Internal Server Error when fetching: https://example.com"
    )
    assert not (tmp_path / "example.com" / "page.html").exists()


@pytest.mark.asyncio
async def test_page_transport_failure_uses_reason(tmp_path):
    job, _, _ = await _run(tmp_path, {})

    assert job.status == JobStatus.FAILED
    assert job.logs[-1].message == "Extraction failed: getaddrinfo ENOTFOUND"


@pytest.mark.asyncio
async def test_unexpected_error_fails_the_job(tmp_path):
    responses = {
        PAGE_URL: _page("/a.js"),
        "https://example.com/a.js": RuntimeError("disk on fire"),
    }

    job, _, _ = await _run(tmp_path, responses)

    assert job.status == JobStatus.FAILED
    assert job.logs[-1].message == "Extraction failed: disk on fire"


@pytest.mark.asyncio
async def test_log_timeline_follows_pipeline_order(tmp_path):
    responses = {
        PAGE_URL: _page("/a.js", "/b.js"),
        "https://example.com/a.js": _ok("https://example.com/a.js", "A"),
        "https://example.com/b.js": HttpStatusFailure(403, "Forbidden"),
    }

    job, _, _ = await _run(tmp_path, responses)

    out = tmp_path / "example.com"
    assert [(e.type, e.message) for e in job.logs] == [
        (LogType.INFO, "Starting extraction for: https://example.com"),
        (LogType.INFO, f"Created download directory: {out}"),
        (LogType.INFO, "Fetching page: https://example.com"),
        (LogType.SUCCESS, f"Saved page HTML → {out / 'page.html'}"),
        (LogType.SUCCESS, "Found 2 .js files. Downloading..."),
        (LogType.PROGRESS, "[1/2] https://example.com/a.js"),
        (LogType.SUCCESS, "    Saved → 001_a.js"),
        (LogType.PROGRESS, "[2/2] https://example.com/b.js"),
        (LogType.ERROR, "    Error: HTTP 403 - Forbidden"),
        (LogType.SUCCESS, f"Done. Files saved in {out}"),
    ]


@pytest.mark.asyncio
async def test_counters_are_published_after_each_script(tmp_path):
    snapshots = []

    class SnoopingRepository(InMemoryExtractionJobRepository):
        async def update(self, job_id, **fields):
            if "successful_files" in fields and "status" not in fields:
                snapshots.append((fields["successful_files"], fields["failed_files"]))
            return await super().update(job_id, **fields)

    repo = SnoopingRepository()
    responses = {
        PAGE_URL: _page("/a.js", "/b.js", "/c.js"),
        "https://example.com/a.js": HttpStatusFailure(404, "Not Found"),
        "https://example.com/b.js": _ok("https://example.com/b.js", "B"),
        "https://example.com/c.js": _ok("https://example.com/c.js", "C"),
    }
    service = ExtractionService(JobRecorder(repo), FakeFetcher(responses), DownloadStorage(tmp_path))
    job = await repo.create("example.com")

    await service.extract(job.id, job.source_url)

    assert snapshots == [(0, 1), (1, 1), (2, 1)]


@pytest.mark.asyncio
async def test_unknown_job_is_ignored(tmp_path):
    repo = InMemoryExtractionJobRepository()
    fetcher = FakeFetcher({PAGE_URL: _page()})
    service = ExtractionService(JobRecorder(repo), fetcher, DownloadStorage(tmp_path))

    await service.extract("missing", PAGE_URL)

    assert fetcher.requested == []


@pytest.mark.asyncio
async def test_fault_mid_download_counts_unattempted_scripts_as_failed(tmp_path):
    responses = {
        PAGE_URL: _page("/a.js", "/b.js", "/c.js"),
        "https://example.com/a.js": _ok("https://example.com/a.js", "A"),
        "https://example.com/b.js": RuntimeError("disk on fire"),
    }

    job, files, _ = await _run(tmp_path, responses)

    assert job.status == JobStatus.FAILED
    assert (job.total_files, job.successful_files, job.failed_files) == (3, 1, 2)
    assert [f.filename for f in files] == ["001_a.js"]
