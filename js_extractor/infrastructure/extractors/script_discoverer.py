"""Script discovery — finds external ``.js`` references in page markup."""

from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

SCRIPT_SELECTOR = "script[src]"
SCRIPT_EXTENSION = ".js"


def _resolve(reference: str, base_url: str) -> str | None:
    """Resolve ``reference`` against ``base_url``; None if the result is not a valid URL."""
    try:
        absolute = urljoin(base_url, reference)
        parsed = urlsplit(absolute)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return absolute


def discover_script_urls(markup: str, base_url: str) -> list[str]:
    """Return absolute script URLs referenced by ``markup``, in first-seen order.

    Only ``<script src>`` references whose path ends in ``.js`` are kept;
    references that cannot be resolved are dropped. Duplicates (exact string
    match) are removed.
    """
    soup = BeautifulSoup(markup, "html.parser")
    urls: list[str] = []
    seen: set[str] = set()

    for element in soup.select(SCRIPT_SELECTOR):
        src = (element.get("src") or "").strip()
        if not src:
            continue

        absolute = _resolve(src, base_url)
        if absolute is None:
            continue
        if not urlsplit(absolute).path.lower().endswith(SCRIPT_EXTENSION):
            continue

        if absolute not in seen:
            seen.add(absolute)
            urls.append(absolute)

    return urls
