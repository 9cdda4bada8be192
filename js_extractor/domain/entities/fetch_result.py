"""Fetch outcomes — a successful download or one of two failure variants.

Fetchers return these as values; callers branch on the type instead of
catching transport exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedResource:
    """Raw bytes of a 2xx response."""

    url: str
    status_code: int
    content: bytes
    encoding: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def text(self) -> str:
        try:
            return self.content.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class FetchFailure(ABC):
    """Base for fetch failures."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Classified error text recorded for the failed fetch."""

    @property
    def status_label(self) -> str:
        return "ERROR"


@dataclass(frozen=True)
class HttpStatusFailure(FetchFailure):
    """A response was received but its status is outside 2xx."""

    status_code: int
    reason: str = ""

    @property
    def message(self) -> str:
        return f"HTTP {self.status_code} - {self.reason or 'Request failed'}"

    @property
    def status_label(self) -> str:
        return f"HTTP {self.status_code}"


@dataclass(frozen=True)
class TransportFailure(FetchFailure):
    """No response: DNS, connect, timeout, protocol or URL errors."""

    reason: str
    error: BaseException | None = None

    @property
    def message(self) -> str:
        return self.reason or "Unknown error"


FetchResult = FetchedResource | HttpStatusFailure | TransportFailure
