"""
Keyword relevance classifier.

Decides whether a tender belongs to the adaptation-works niche from plain
case-insensitive substring matches over its title and description. There
is no tokenizing or stemming, so "ramp" also matches "trampoline". Tune
the keyword sets in configuration rather than here.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from adaptwatch.core.config.models import RelevanceConfig
from adaptwatch.core.normalize.canonical import Tender


@dataclass(frozen=True)
class RelevanceDecision:
    """Outcome of classifying one tender, with the keywords that decided it."""

    relevant: bool
    core_hits: tuple[str, ...] = ()
    exclude_hits: tuple[str, ...] = ()
    context_hits: tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        if self.exclude_hits:
            return f"excluded by {', '.join(self.exclude_hits)}"
        if not self.core_hits:
            return "no core keyword"
        if not self.relevant:
            return "no context keyword"
        return f"matched {', '.join(self.core_hits)}"


@dataclass
class RelevanceClassifier:
    """Inclusion/exclusion keyword filter built from a RelevanceConfig."""

    config: RelevanceConfig = field(default_factory=RelevanceConfig)

    def explain(self, tender: Tender) -> RelevanceDecision:
        """Classify a tender and report which keywords matched."""
        text = tender.text.lower()

        core_hits = _matches(text, self.config.core_keywords)
        exclude_hits = _matches(text, self.config.exclude_keywords)
        context_hits = (
            _matches(text, self.config.context_keywords)
            if self.config.require_context
            else ()
        )

        relevant = bool(core_hits) and not exclude_hits
        if relevant and self.config.require_context:
            relevant = bool(context_hits)

        return RelevanceDecision(
            relevant=relevant,
            core_hits=core_hits,
            exclude_hits=exclude_hits,
            context_hits=context_hits,
        )

    def is_relevant(self, tender: Tender) -> bool:
        """True iff a core keyword matches and no exclude keyword does.

        In strict mode a context keyword must match as well.
        """
        return self.explain(tender).relevant


def _matches(text: str, keywords: list[str]) -> tuple[str, ...]:
    return tuple(keyword for keyword in keywords if keyword in text)
