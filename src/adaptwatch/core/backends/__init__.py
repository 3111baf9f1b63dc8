"""Backend implementations for fetching from the upstream notice service."""

from .base import (
    Backend,
    BackendError,
    FetchError,
    FetchResult,
    RateLimitError,
    RequestSpec,
    ServerError,
)
from .http_backend import HttpBackend

__all__ = [
    # Base classes
    "Backend",
    "RequestSpec",
    "FetchResult",
    # Errors
    "BackendError",
    "FetchError",
    "RateLimitError",
    "ServerError",
    # HTTP backend
    "HttpBackend",
]
