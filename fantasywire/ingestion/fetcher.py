"""Bounded-timeout, bounded-retry HTTP fetch shared by every outbound request."""

import asyncio
import logging
from typing import Optional

import httpx

from ..config import FetchConfig
from ..errors import FetchError
from .models import FetchResponse

logger = logging.getLogger(__name__)


def is_retryable_status(status: int) -> bool:
    """Only server errors and rate limiting are worth another attempt."""
    return status == 429 or 500 <= status < 600


class ResilientFetcher:
    """Fetch URLs with a per-attempt deadline and linear backoff.

    4xx responses (other than 429) are terminal for the URL. 5xx, 429 and
    transport failures (DNS, TLS, resets, timeouts) are retried up to
    ``max_retries`` extra attempts, sleeping ``backoff_seconds * attempt``
    between them. Each attempt, body included, must finish within the
    timeout. Any other httpx error (redirect loops, bad content-encoding)
    is terminal.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize fetcher; a client is built unless one is supplied."""
        self.config = config or FetchConfig()
        self._transport = transport
        self._client = client or self._build_client()
        self._owns_client = client is None

    def _build_client(self) -> httpx.AsyncClient:
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": (
                "application/rss+xml,application/atom+xml,application/xml;q=0.9,"
                "text/html;q=0.8,*/*;q=0.5"
            ),
        }
        kwargs = {
            "timeout": self.config.timeout_seconds,
            "headers": headers,
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> FetchResponse:
        """Fetch ``url`` and return its body, or raise ``FetchError``."""
        timeout = self.config.timeout_seconds if timeout is None else timeout
        retries = self.config.max_retries if max_retries is None else max_retries
        attempts = retries + 1

        last_error = "no attempt made"
        last_status: Optional[int] = None

        for attempt in range(1, attempts + 1):
            try:
                response = await asyncio.wait_for(self._client.get(url, timeout=timeout), timeout)
            except (httpx.TransportError, asyncio.TimeoutError) as e:
                last_error = f"{type(e).__name__}: {e}" if str(e) else f"Timed out after {timeout}s"
                last_status = None
                logger.debug("Attempt %d/%d for %s failed: %s", attempt, attempts, url, last_error)
            except httpx.HTTPError as e:
                # Redirect loops, undecodable bodies
                raise FetchError(url, f"{type(e).__name__}: {e}", attempts=attempt) from e
            except httpx.InvalidURL as e:
                raise FetchError(url, f"Invalid URL: {e}", attempts=attempt) from e
            else:
                status = response.status_code
                if 200 <= status < 300:
                    return FetchResponse(
                        url=url,
                        final_url=str(response.url),
                        status=status,
                        body=response.text,
                    )
                last_status = status
                last_error = f"HTTP {status}"
                if not is_retryable_status(status):
                    raise FetchError(url, last_error, status=status, attempts=attempt)
                logger.debug("Attempt %d/%d for %s returned %d", attempt, attempts, url, status)

            if attempt < attempts:
                await asyncio.sleep(self.config.backoff_seconds * attempt)

        raise FetchError(url, last_error, status=last_status, attempts=attempts)

    async def close(self) -> None:
        """Close the underlying client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ResilientFetcher":
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.close()
