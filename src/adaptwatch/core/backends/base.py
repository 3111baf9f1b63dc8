"""
Request/response types and the backend seam for the notice service.

A backend performs one logical GET (retries included) and hands back a
FetchResult, or raises a BackendError when no response could be had.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class RequestSpec:
    """A GET against the notice service."""

    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None

    # Log context only, never sent
    jurisdiction: str | None = None


@dataclass
class FetchResult:
    """Final response of a request, after any retries."""

    url: str
    status_code: int
    text: str
    elapsed_ms: float
    attempts: int = 1
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body. Raises ValueError on malformed JSON."""
        return json.loads(self.text)


class Backend(ABC):
    """Something that can turn a RequestSpec into a FetchResult."""

    name: str = "backend"

    @abstractmethod
    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Perform the request.

        Raises:
            BackendError: When no response could be obtained
        """

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "Backend":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


# =============================================================================
# Errors
# =============================================================================


class BackendError(Exception):
    """No usable response from the notice service."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class FetchError(BackendError):
    """Every attempt failed."""


class RateLimitError(BackendError):
    """429 from the service; ``retry_after`` is the Retry-After hint in seconds."""

    def __init__(self, message: str, *, url: str | None = None, retry_after: float | None = None):
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class ServerError(BackendError):
    """5xx from the service."""
