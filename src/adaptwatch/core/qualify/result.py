"""
Qualification results and ranking.

A QualificationResult is the only shape the notification side depends on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from adaptwatch.core.normalize.canonical import PublicTender

from .classifier import QualificationStatus


@dataclass(frozen=True)
class QualificationResult:
    """Outcome for one (tender, profile) pair."""

    tender: PublicTender
    score: int
    status: QualificationStatus
    passes: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "tender": self.tender.to_dict(),
            "score": self.score,
            "status": self.status.value,
            "passes": list(self.passes),
            "issues": list(self.issues),
        }


def rank_results(
    results: Iterable[QualificationResult],
    top_n: int | None = None,
) -> list[QualificationResult]:
    """Sort by score, highest first, and keep the top ``top_n``.

    The sort is stable, so equal scores keep discovery order.
    """
    ranked = sorted(results, key=lambda result: result.score, reverse=True)
    if top_n is not None:
        ranked = ranked[:top_n]
    return ranked
