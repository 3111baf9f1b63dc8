"""Fetch utilities - retries."""

from .retries import RetryConfig

__all__ = [
    "RetryConfig",
]
