"""
httpx backend for the notice service.

One pooled AsyncClient per backend. Connection failures, timeouts, 429
and 5xx responses are retried per the RetryConfig. Any other status
comes back as a FetchResult for the caller to judge.
"""

from __future__ import annotations

import time

import httpx

from adaptwatch import __app_name__, __version__
from adaptwatch.core.fetch.retries import RetryConfig

from .base import (
    Backend,
    FetchError,
    FetchResult,
    RateLimitError,
    RequestSpec,
    ServerError,
)

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    httpx.TransportError,
    RateLimitError,
    ServerError,
)


def _retry_after_seconds(value: str | None) -> float | None:
    # Only the delta-seconds form; HTTP-date hints are ignored
    try:
        return max(float(value), 0.0) if value else None
    except ValueError:
        return None


def raise_for_retryable(response: httpx.Response) -> None:
    """Turn a 429 or 5xx response into the matching retryable error."""
    status = response.status_code
    if status == 429:
        raise RateLimitError(
            "Rate limited by notice service",
            url=str(response.url),
            retry_after=_retry_after_seconds(response.headers.get("Retry-After")),
        )
    if status >= 500:
        raise ServerError(f"Notice service returned {status}", url=str(response.url), status_code=status)


class HttpBackend(Backend):
    """Async GET with pooling and retries."""

    name = "http"

    def __init__(
        self,
        timeout: float = 30.0,
        retry: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            timeout: Request timeout in seconds unless the RequestSpec sets one
            retry: Attempts and backoff
            transport: httpx transport override, e.g. httpx.MockTransport
        """
        self.timeout = timeout
        self.retry = retry or RetryConfig(retry_exceptions=RETRYABLE_ERRORS)
        self.headers = {
            "User-Agent": f"{__app_name__}/{__version__}",
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def fetch(self, request: RequestSpec) -> FetchResult:
        """GET ``request.url``, retrying transient failures.

        Raises:
            FetchError: When the last attempt still failed
        """
        timeout = request.timeout or httpx.USE_CLIENT_DEFAULT
        attempts = 0

        try:
            async for attempt in self.retry.retrying(RETRYABLE_ERRORS):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    started = time.perf_counter()
                    response = await self.client.get(
                        request.url,
                        params=request.params or None,
                        headers=request.headers or None,
                        timeout=timeout,
                    )
                    raise_for_retryable(response)
        except (RateLimitError, ServerError) as e:
            raise FetchError(
                f"{e} (gave up after {attempts} attempts)",
                url=request.url,
                status_code=e.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"{type(e).__name__} after {attempts} attempts: {e}",
                url=request.url,
                cause=e,
            ) from e

        return FetchResult(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            attempts=attempts,
        )

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
