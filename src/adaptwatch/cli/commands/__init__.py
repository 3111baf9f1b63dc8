"""CLI command modules."""

from . import tenders

__all__ = [
    "tenders",
]
