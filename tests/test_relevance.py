"""Tests for the keyword relevance classifier."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from adaptwatch.core.config import RelevanceConfig
from adaptwatch.core.filters import RelevanceClassifier

from .conftest import make_tender


@pytest.fixture
def classifier() -> RelevanceClassifier:
    return RelevanceClassifier()


class TestRelevanceClassifier:
    """Tests for RelevanceClassifier with the shipped keyword sets."""

    def test_core_keyword_in_title(self, classifier: RelevanceClassifier) -> None:
        tender = make_tender(title="Stairlift servicing", description="")
        assert classifier.is_relevant(tender)

    def test_core_keyword_in_description(self, classifier: RelevanceClassifier) -> None:
        tender = make_tender(title="Framework lot 3", description="Includes WHEELCHAIR ramps.")
        assert classifier.is_relevant(tender)

    def test_no_core_keyword(self, classifier: RelevanceClassifier) -> None:
        tender = make_tender(title="Grounds maintenance", description="Grass cutting and hedges.")

        decision = classifier.explain(tender)

        assert not decision.relevant
        assert decision.reason == "no core keyword"

    def test_exclusion_beats_core_keyword(self, classifier: RelevanceClassifier) -> None:
        """An excluded phrase in the title rejects an otherwise relevant tender."""
        tender = make_tender(
            title="IT system maintenance contract",
            description="Case management for the adaptation service.",
        )

        decision = classifier.explain(tender)

        assert not decision.relevant
        assert "adaptation" in decision.core_hits
        assert decision.exclude_hits == ("it system",)
        assert decision.reason == "excluded by it system"

    def test_plain_substring_matching(self, classifier: RelevanceClassifier) -> None:
        """No tokenizing: 'ramp' matches inside a longer word."""
        tender = make_tender(title="Trampoline park refurbishment", description="")
        assert classifier.is_relevant(tender)

    def test_context_ignored_by_default(self, classifier: RelevanceClassifier) -> None:
        tender = make_tender(title="Hoist supply", description="Ceiling track hoists.")

        decision = classifier.explain(tender)

        assert decision.relevant
        assert decision.context_hits == ()


class TestStrictMode:
    """Tests for require_context."""

    def test_requires_context_keyword(self) -> None:
        classifier = RelevanceClassifier(RelevanceConfig(require_context=True))
        tender = make_tender(title="Hoist supply", description="Ceiling track hoists.")

        decision = classifier.explain(tender)

        assert not decision.relevant
        assert decision.reason == "no context keyword"

    def test_passes_with_context_keyword(self) -> None:
        classifier = RelevanceClassifier(RelevanceConfig(require_context=True))
        tender = make_tender(title="Hoist installation", description="Residential properties.")

        decision = classifier.explain(tender)

        assert decision.relevant
        assert "installation" in decision.context_hits


class TestRelevanceConfig:
    """Tests for keyword configuration."""

    def test_keywords_lowercased(self) -> None:
        config = RelevanceConfig(core_keywords=["  Wet Room ", "wet room", "DFG"])
        assert config.core_keywords == ["wet room", "dfg"]

    def test_custom_keywords(self) -> None:
        classifier = RelevanceClassifier(
            RelevanceConfig(core_keywords=["bathroom"], exclude_keywords=["survey"])
        )

        assert classifier.is_relevant(make_tender(title="Bathroom refits", description=""))
        assert not classifier.is_relevant(
            make_tender(title="Bathroom condition survey", description="")
        )

    def test_empty_core_keywords_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RelevanceConfig(core_keywords=[])
