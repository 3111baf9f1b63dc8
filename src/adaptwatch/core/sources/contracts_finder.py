"""
Contracts Finder notice-search client.

Issues one OCDS search per jurisdiction. A failing jurisdiction never
aborts a run: transport errors, bad statuses, timeouts and unparseable
bodies are logged and count as "no releases for this jurisdiction".
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Sequence

from adaptwatch.core.backends.base import Backend, BackendError, RequestSpec
from adaptwatch.core.backends.http_backend import RETRYABLE_ERRORS, HttpBackend
from adaptwatch.core.config.models import SourceConfig
from adaptwatch.core.errors import SourceUnavailableError
from adaptwatch.core.fetch.retries import RetryConfig
from adaptwatch.core.logging import get_contextual_logger


@dataclass
class JurisdictionResult:
    """Releases returned for one jurisdiction query."""

    jurisdiction: str
    releases: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ContractsFinderClient:
    """Client for the upstream notice-search service.

    Usage:
        async with ContractsFinderClient(config.source) as client:
            results = await client.search_all(published_since=since)
    """

    def __init__(
        self,
        config: SourceConfig | None = None,
        backend: Backend | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Source configuration
            backend: Fetch backend (default: HttpBackend built from config)
            run_id: Run identifier added to log records
        """
        self.config = config or SourceConfig()
        self._owns_backend = backend is None
        self.backend = backend or HttpBackend(
            timeout=self.config.timeout_seconds,
            retry=RetryConfig.from_source(self.config, RETRYABLE_ERRORS),
        )
        self.run_id = run_id

    def build_request(
        self,
        jurisdiction: str,
        keywords: str,
        published_since: date,
    ) -> RequestSpec:
        """Build the search request for one jurisdiction."""
        return RequestSpec(
            url=self.config.base_url,
            params={
                "keywords": keywords,
                "location": jurisdiction,
                "publishedFrom": published_since.isoformat(),
                "limit": str(self.config.result_limit),
            },
            timeout=self.config.timeout_seconds,
            jurisdiction=jurisdiction,
        )

    async def fetch_jurisdiction(
        self,
        jurisdiction: str,
        keywords: str,
        published_since: date,
    ) -> JurisdictionResult:
        """Query one jurisdiction, recording any failure instead of raising.

        ``timeout_seconds`` bounds the whole query, retries and backoff included.
        """
        log = get_contextual_logger("source", jurisdiction=jurisdiction, run_id=self.run_id)

        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                releases = await self._fetch_releases(jurisdiction, keywords, published_since)
        except TimeoutError:
            log.warning("Source timed out after %.1fs", self.config.timeout_seconds)
            return JurisdictionResult(
                jurisdiction, error=f"Timed out after {self.config.timeout_seconds:g}s"
            )
        except SourceUnavailableError as e:
            log.warning("Source unavailable: %s", e)
            return JurisdictionResult(jurisdiction, error=str(e))

        log.info("Got %d releases", len(releases))
        return JurisdictionResult(jurisdiction, releases=releases)

    async def _fetch_releases(
        self,
        jurisdiction: str,
        keywords: str,
        published_since: date,
    ) -> list[dict[str, Any]]:
        """Fetch and decode one search response.

        Raises:
            SourceUnavailableError: On any transport, status or decoding failure
        """
        request = self.build_request(jurisdiction, keywords, published_since)

        try:
            response = await self.backend.fetch(request)
        except BackendError as e:
            raise SourceUnavailableError(str(e), jurisdiction=jurisdiction, cause=e) from e
        except Exception as e:
            raise SourceUnavailableError(
                f"Unexpected fetch failure: {e!r}", jurisdiction=jurisdiction, cause=e
            ) from e

        if not response.ok:
            raise SourceUnavailableError(f"HTTP {response.status_code}", jurisdiction=jurisdiction)

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailableError(f"Invalid JSON: {e}", jurisdiction=jurisdiction, cause=e) from e

        return extract_releases(data)

    async def search(
        self,
        jurisdiction: str,
        keywords: str,
        published_since: date,
    ) -> list[dict[str, Any]]:
        """Return the release list for one jurisdiction, or [] on failure."""
        result = await self.fetch_jurisdiction(jurisdiction, keywords, published_since)
        return result.releases

    async def search_all(
        self,
        jurisdictions: Sequence[str] | None = None,
        *,
        keywords: str | None = None,
        published_since: date,
    ) -> list[JurisdictionResult]:
        """Query every jurisdiction concurrently.

        Results come back in jurisdiction-list order regardless of which
        request finished first.
        """
        jurisdictions = list(self.config.jurisdictions if jurisdictions is None else jurisdictions)
        keywords = self.config.keyword_query if keywords is None else keywords
        semaphore = asyncio.Semaphore(self.config.concurrency)

        async def bounded(jurisdiction: str) -> JurisdictionResult:
            async with semaphore:
                return await self.fetch_jurisdiction(jurisdiction, keywords, published_since)

        return list(await asyncio.gather(*(bounded(j) for j in jurisdictions)))

    async def close(self) -> None:
        """Close the backend if this client created it."""
        if self._owns_backend:
            await self.backend.close()

    async def __aenter__(self) -> "ContractsFinderClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def extract_releases(data: Any) -> list[dict[str, Any]]:
    """Pull the releases collection out of a search response.

    A missing or malformed collection means zero results.
    """
    if not isinstance(data, dict):
        return []
    releases = data.get("releases")
    if not isinstance(releases, list):
        return []
    return [release for release in releases if isinstance(release, dict)]
