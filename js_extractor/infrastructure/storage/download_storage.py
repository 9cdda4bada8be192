"""Local filesystem storage for extraction artifacts.

Storage layout:
    <download_dir>/<domain>/page.html               — fetched page
    <download_dir>/<domain>/<NNN>_<name>.js         — downloaded scripts
    <download_dir>/<domain>/all_js_combined.txt     — combined artifact
    <download_dir>/<domain>/manifest.txt            — tab-separated index

Jobs for the same domain share a directory; a later job overwrites the
artifacts of an earlier one.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PAGE_FILENAME = "page.html"
COMBINED_FILENAME = "all_js_combined.txt"
MANIFEST_FILENAME = "manifest.txt"


class DownloadStorage:
    """Infrastructure adapter for per-domain artifact storage."""

    def __init__(self, download_dir: str | Path):
        self._download_dir = Path(download_dir)

    @property
    def download_dir(self) -> Path:
        return self._download_dir

    def domain_dir(self, domain: str) -> Path:
        return self._download_dir / domain

    def ensure_domain_dir(self, domain: str) -> Path:
        """Create ``<download_dir>/<domain>`` if needed. OSError propagates."""
        path = self.domain_dir(domain)
        path.mkdir(parents=True, exist_ok=True)
        return path

    async def write_bytes(self, domain: str, filename: str, content: bytes) -> Path:
        dest_path = self.domain_dir(domain) / filename
        dest_path.write_bytes(content)
        logger.debug("Stored %s (%d bytes)", dest_path, len(content))
        return dest_path

    async def write_text(self, domain: str, filename: str, text: str) -> Path:
        dest_path = self.domain_dir(domain) / filename
        dest_path.write_text(text, encoding="utf-8")
        logger.debug("Stored %s (%d chars)", dest_path, len(text))
        return dest_path

    def resolve(self, domain: str, filename: str) -> Path | None:
        """Return the path of a stored artifact, or None if missing or outside the download dir."""
        root = self._download_dir.resolve()
        candidate = (self._download_dir / domain / filename).resolve()
        if not candidate.is_relative_to(root) or candidate == root:
            logger.warning("Rejected artifact path outside download dir: %s/%s", domain, filename)
            return None
        if not candidate.is_file():
            return None
        return candidate
