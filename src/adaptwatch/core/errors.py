"""
Error types for AdaptWatch.

Only ProfileError and ConfigError are meant to reach a caller. Source
and data problems are recovered inside the pipeline.
"""

from __future__ import annotations


class AdaptWatchError(Exception):
    """Base exception for AdaptWatch errors."""


class SourceUnavailableError(AdaptWatchError):
    """A single jurisdiction query failed or timed out."""

    def __init__(self, message: str, jurisdiction: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.jurisdiction = jurisdiction
        self.cause = cause


class NormalizationError(AdaptWatchError):
    """An upstream release could not be mapped to a Tender."""


class ProfileError(AdaptWatchError):
    """A capability profile is missing required fields or holds bad values."""

    def __init__(self, message: str, account_id: str | None = None, details: list[str] | None = None):
        super().__init__(message)
        self.account_id = account_id
        self.details = details or []

    def __str__(self) -> str:
        base = super().__str__()
        if self.details:
            return f"{base}: " + "; ".join(self.details)
        return base


class ConfigError(AdaptWatchError):
    """Configuration loading or validation error."""

    def __init__(self, message: str, path: object | None = None, details: str | None = None):
        self.path = path
        self.details = details
        super().__init__(message)
