"""HTTP resource fetcher — implements the ResourceFetcher interface with httpx.

Every request carries the same browser-like User-Agent and a bounded
timeout. Failures come back as values (HttpStatusFailure / TransportFailure)
so the extraction loop never has to inspect exception shapes.
"""

import logging

import httpx

from js_extractor.application.interfaces.resource_fetcher import ResourceFetcher
from js_extractor.domain.entities import (
    FetchedResource,
    FetchResult,
    HttpStatusFailure,
    TransportFailure,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 20.0


class HttpResourceFetcher(ResourceFetcher):
    """Infrastructure adapter — single GET per call, no retries."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._user_agent = user_agent
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

    async def fetch(self, url: str) -> FetchResult:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.get(
                url,
                headers=self._get_headers(),
                timeout=self._timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            logger.debug("Timeout fetching %s: %s", url, exc)
            return TransportFailure(
                reason=f"timeout of {int(self._timeout * 1000)}ms exceeded",
                error=exc,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Transport error fetching %s: %r", url, exc)
            return TransportFailure(reason=str(exc) or type(exc).__name__, error=exc)
        except Exception as exc:
            logger.exception("Unexpected error fetching %s", url)
            return TransportFailure(reason=str(exc) or type(exc).__name__, error=exc)
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            return HttpStatusFailure(
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        return FetchedResource(
            url=url,
            status_code=response.status_code,
            content=response.content,
            encoding=response.encoding,
        )
