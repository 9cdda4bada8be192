"""Abstract interface (port) for retrieving remote resources."""

from abc import ABC, abstractmethod

from js_extractor.domain.entities import FetchResult


class ResourceFetcher(ABC):
    """Port for one-shot HTTP retrieval — implemented in the infrastructure layer."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """Fetch ``url`` once.

        Returns a FetchedResource for 2xx responses, otherwise an
        HttpStatusFailure or TransportFailure. Must not raise.
        """
        ...
