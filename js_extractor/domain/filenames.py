"""Local file naming for downloaded scripts.

Names are ``<index:03d>_<sanitised basename>`` so the on-disk listing follows
discovery order.
"""

import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

_UNSAFE_CHARS_RE = re.compile(r'[:\\/<>?"|*]')
_WHITESPACE_RE = re.compile(r"\s+")
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

FALLBACK_NAME = "file"


def _percent_decode(segment: str) -> str:
    """Decode %XX escapes, or return the segment as-is if they are malformed."""
    if _MALFORMED_ESCAPE_RE.search(segment):
        return segment
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError:
        return segment


def safe_filename(segment: str) -> str:
    """Turn a URL path segment into a name that is safe on any filesystem.

    Malformed percent escapes are left undecoded; unsafe characters in such
    a segment are still replaced.
    """
    name = _percent_decode(segment)
    name = _UNSAFE_CHARS_RE.sub("_", name)
    name = _WHITESPACE_RE.sub("_", name)
    return name or FALLBACK_NAME


def local_filename(index: int, url: str) -> str:
    """Order-prefixed local name for the ``index``-th (1-based) script."""
    basename = PurePosixPath(urlsplit(url).path).name or f"script_{index}.js"
    return f"{index:03d}_{safe_filename(basename)}"


def failed_filename(index: int) -> str:
    """Placeholder name recorded for a script that could not be downloaded."""
    return f"failed_{index}.js"
