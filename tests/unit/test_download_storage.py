"""Unit tests for per-domain artifact storage."""

import pytest

from js_extractor.infrastructure.storage.download_storage import DownloadStorage


@pytest.mark.asyncio
async def test_writes_into_domain_directory(tmp_path):
    storage = DownloadStorage(tmp_path / "downloads")
    domain_dir = storage.ensure_domain_dir("example.com")

    page = await storage.write_bytes("example.com", "page.html", b"<html></html>")
    notes = await storage.write_text("example.com", "manifest.txt", "ünïcode\n")

    assert domain_dir == tmp_path / "downloads" / "example.com"
    assert page.read_bytes() == b"<html></html>"
    assert notes.read_text(encoding="utf-8") == "ünïcode\n"


@pytest.mark.asyncio
async def test_later_writes_overwrite_earlier_artifacts(tmp_path):
    storage = DownloadStorage(tmp_path)
    storage.ensure_domain_dir("example.com")

    await storage.write_text("example.com", "manifest.txt", "first run")
    path = await storage.write_text("example.com", "manifest.txt", "second run")

    assert path.read_text(encoding="utf-8") == "second run"


@pytest.mark.asyncio
async def test_resolve_rejects_paths_outside_download_dir(tmp_path):
    storage = DownloadStorage(tmp_path / "downloads")
    storage.ensure_domain_dir("example.com")
    await storage.write_text("example.com", "page.html", "x")
    (tmp_path / "secret.txt").write_text("nope")

    assert storage.resolve("example.com", "page.html") == (tmp_path / "downloads" / "example.com" / "page.html").resolve()
    assert storage.resolve("..", "secret.txt") is None
    assert storage.resolve("example.com", "missing.js") is None
    assert storage.resolve("example.com", "..") is None
