"""Notification dispatchers."""

from .console import ConsoleDispatcher, build_results_table

__all__ = [
    "ConsoleDispatcher",
    "build_results_table",
]
