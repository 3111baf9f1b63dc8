"""
Seams to the collaborators that live outside the pipeline.

The pipeline reads profiles from a ProfileStore and hands ranked results
to a NotificationDispatcher. Neither is owned by the core.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from adaptwatch.core.qualify.result import QualificationResult


@runtime_checkable
class ProfileStore(Protocol):
    """Supplies raw capability profile records keyed by account id."""

    def load_profiles(self) -> Mapping[str, Any]:
        ...


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Formats and delivers results for one account."""

    def dispatch(self, account_id: str, results: Sequence["QualificationResult"]) -> None:
        ...
