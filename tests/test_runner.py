"""Tests for the discovery and qualification runner."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import httpx
import pytest
import yaml

from adaptwatch.core.config import AppConfig
from adaptwatch.core.errors import ProfileError
from adaptwatch.core.filters import RelevanceClassifier
from adaptwatch.core.interfaces import NotificationDispatcher, ProfileStore
from adaptwatch.core.orchestrator import (
    RunStats,
    discover_tenders,
    filter_tenders,
    normalize_results,
    qualify_tender,
    qualify_tenders,
    run_qualification_pass,
)
from adaptwatch.core.qualify import CapabilityProfile, QualificationResult, QualificationStatus
from adaptwatch.core.sources import JurisdictionResult
from adaptwatch.core.stores import YamlProfileStore

from .conftest import NOW, json_response, make_client, make_release, make_tender

RELEASES = {
    "Birmingham": [
        make_release("T1", title="Stairlift installation programme"),
        make_release("T2", title="IT system upgrade for adaptation team"),
        make_release("T3", title="Wet room conversions", tenderPeriod={"endDate": "2026-09-20T12:00:00Z"}),
    ],
    "Dudley": [
        make_release("T1", title="Stairlift installation programme"),
        make_release("T4", title="Ramp and handrail works", value={"amount": 500000}),
        make_release(None, title="Ceiling hoist supply"),
    ],
}


def upstream(request: httpx.Request) -> httpx.Response:
    return json_response({"releases": RELEASES.get(request.url.params["location"], [])})


class RecordingDispatcher:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list[QualificationResult]]] = []

    def dispatch(self, account_id: str, results: Sequence[QualificationResult]) -> None:
        self.calls.append((account_id, list(results)))


class TestNormalizeResults:
    """Tests for normalize_results."""

    def test_concatenated_in_jurisdiction_order(self) -> None:
        results = [
            JurisdictionResult("Birmingham", [make_release("A"), make_release("B")]),
            JurisdictionResult("Dudley", [make_release("C")]),
        ]
        stats = RunStats()

        tenders = normalize_results(results, stats=stats)

        assert [(t.id, t.jurisdiction) for t in tenders] == [
            ("A", "Birmingham"), ("B", "Birmingham"), ("C", "Dudley"),
        ]
        assert stats.releases_fetched == 3
        assert stats.tenders_normalized == 3

    def test_unidentifiable_release_skipped(self) -> None:
        stats = RunStats()
        tenders = normalize_results(
            [JurisdictionResult("Walsall", [make_release(None), make_release("A")])],
            stats=stats,
        )

        assert [t.id for t in tenders] == ["A"]
        assert stats.releases_skipped == 1

    def test_failed_jurisdiction_counted(self) -> None:
        stats = RunStats()
        normalize_results([JurisdictionResult("Walsall", error="HTTP 500")], stats=stats)

        assert stats.jurisdictions_queried == 1
        assert stats.jurisdictions_failed == 1
        assert stats.warnings == ["Walsall: HTTP 500"]


class TestFilterTenders:
    """Tests for filter_tenders."""

    def test_dedupe_before_filters(self) -> None:
        """The Birmingham copy of a shared notice survives, the Dudley one does not."""
        tenders = [
            make_tender(id="T1", jurisdiction="Birmingham"),
            make_tender(id="T1", jurisdiction="Dudley"),
        ]
        stats = RunStats()

        kept = filter_tenders(tenders, classifier=RelevanceClassifier(), now=NOW, stats=stats)

        assert [(t.id, t.jurisdiction) for t in kept] == [("T1", "Birmingham")]
        assert stats.duplicates_dropped == 1

    def test_drops_irrelevant_and_expired(self) -> None:
        tenders = [
            make_tender(id="keep"),
            make_tender(id="irrelevant", title="Office cleaning", description="Daily cleaning."),
            make_tender(id="expired", deadline="2026-09-21T12:00:00Z"),
            make_tender(id="no-deadline", deadline=None),
        ]
        stats = RunStats()

        kept = filter_tenders(tenders, classifier=RelevanceClassifier(), now=NOW, stats=stats)

        assert [t.id for t in kept] == ["keep"]
        assert stats.irrelevant_dropped == 1
        assert stats.expired_dropped == 2
        assert stats.tenders_kept == 1


class TestQualify:
    """Tests for qualify_tender and qualify_tenders."""

    def test_qualify_tender(self, profile: CapabilityProfile) -> None:
        result = qualify_tender(make_tender(), profile)

        assert result.score == 58
        assert result.status is QualificationStatus.QUALIFIED
        assert result.tender == make_tender().public()

    def test_ranked_and_truncated(self, profile: CapabilityProfile) -> None:
        tenders = [make_tender(id=f"T{i}", value=v) for i, v in enumerate([1e6, 1e5, 3e5, 2e5])]

        results = qualify_tenders(tenders, profile, top_n=2)

        assert [r.tender.id for r in results] == ["T1", "T3"]
        assert [r.score for r in results] == [58, 53]

    def test_deterministic(self, profile: CapabilityProfile) -> None:
        tenders = [make_tender(id=f"T{i}") for i in range(3)]
        assert qualify_tenders(tenders, profile) == qualify_tenders(tenders, profile)


class TestDiscoverTenders:
    """Tests for discover_tenders."""

    def test_end_to_end(self, app_config: AppConfig) -> None:
        client = make_client(upstream, config=app_config.source)

        discovery = asyncio.run(discover_tenders(app_config, client=client, now=NOW))

        assert [(t.id, t.jurisdiction) for t in discovery.tenders] == [
            ("T1", "Birmingham"),
            ("T4", "Dudley"),
        ]
        stats = discovery.stats
        assert stats.jurisdictions_queried == 2
        assert stats.releases_fetched == 6
        assert stats.releases_skipped == 1
        assert stats.duplicates_dropped == 1
        assert stats.irrelevant_dropped == 1
        assert stats.expired_dropped == 1
        assert stats.tenders_kept == 2

    def test_published_since_sent_upstream(self, app_config: AppConfig) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["publishedFrom"])
            return json_response({"releases": []})

        client = make_client(handler, config=app_config.source)
        asyncio.run(discover_tenders(app_config, client=client, now=NOW, published_since="30 days ago"))

        assert seen == ["2026-09-01", "2026-09-01"]

    def test_all_sources_down(self, app_config: AppConfig) -> None:
        client = make_client(lambda request: httpx.Response(503), config=app_config.source)

        discovery = asyncio.run(discover_tenders(app_config, client=client, now=NOW))

        assert discovery.tenders == []
        assert discovery.stats.jurisdictions_failed == 2


class TestRunQualificationPass:
    """Tests for run_qualification_pass."""

    def test_results_per_account(
        self, app_config: AppConfig, profile_data: dict[str, Any]
    ) -> None:
        dispatcher = RecordingDispatcher()
        profiles = {
            "alice@example.com": profile_data,
            "bob@example.com": {**profile_data, "hasSafeguardingPolicy": False},
        }
        client = make_client(upstream, config=app_config.source)

        outcome = asyncio.run(
            run_qualification_pass(
                profiles, config=app_config, client=client, dispatcher=dispatcher, now=NOW
            )
        )

        alice = outcome.results["alice@example.com"]
        bob = outcome.results["bob@example.com"]
        # T1 is valued at 120,000 (turnover >= 3x); T4 at 500,000 (turnover < 1x)
        assert [(r.tender.id, r.score) for r in alice] == [("T1", 58), ("T4", 45)]
        assert all(r.status is QualificationStatus.QUALIFIED for r in alice)
        assert all(r.status is QualificationStatus.CONDITIONAL for r in bob)
        assert [account for account, _ in dispatcher.calls] == ["alice@example.com", "bob@example.com"]
        assert outcome.stats.profiles_evaluated == 2
        assert outcome.stats.finished_at is not None

    def test_invalid_profile_rejected_before_fetch(
        self, app_config: AppConfig, profile_data: dict[str, Any]
    ) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return json_response({"releases": []})

        client = make_client(handler, config=app_config.source)
        profiles = {"ok@example.com": profile_data, "bad@example.com": {"turnover": 1}}

        with pytest.raises(ProfileError) as exc_info:
            asyncio.run(run_qualification_pass(profiles, config=app_config, client=client, now=NOW))

        assert exc_info.value.account_id == "bad@example.com"
        assert calls == 0

    def test_reads_profile_store(
        self, tmp_path: Path, app_config: AppConfig, profile_data: dict[str, Any]
    ) -> None:
        """A ProfileStore is read once and only its active profiles are evaluated."""
        path = tmp_path / "profiles.yaml"
        path.write_text(
            yaml.safe_dump({
                "alice@example.com": {"subscription_active": True, "profile": profile_data},
                "bob@example.com": {"subscription_active": False, "profile": profile_data},
            }),
            encoding="utf-8",
        )
        store = YamlProfileStore(path)
        client = make_client(upstream, config=app_config.source)

        outcome = asyncio.run(run_qualification_pass(store, config=app_config, client=client, now=NOW))

        assert isinstance(store, ProfileStore)
        assert list(outcome.results) == ["alice@example.com"]
        assert outcome.stats.profiles_evaluated == 1

    def test_top_n_from_config(self, profile_data: dict[str, Any]) -> None:
        config = AppConfig.model_validate(
            {"source": {"jurisdictions": ["Birmingham", "Dudley"]}, "results": {"top_n": 1}}
        )
        client = make_client(upstream, config=config.source)

        outcome = asyncio.run(
            run_qualification_pass({"a": profile_data}, config=config, client=client, now=NOW)
        )

        assert [r.tender.id for r in outcome.results["a"]] == ["T1"]

    def test_dispatcher_failure_recorded(
        self, app_config: AppConfig, profile_data: dict[str, Any]
    ) -> None:
        class BrokenDispatcher:
            def dispatch(self, account_id: str, results: Sequence[QualificationResult]) -> None:
                raise RuntimeError("mail server down")

        assert isinstance(BrokenDispatcher(), NotificationDispatcher)
        client = make_client(upstream, config=app_config.source)

        outcome = asyncio.run(
            run_qualification_pass(
                {"a": profile_data}, config=app_config, client=client,
                dispatcher=BrokenDispatcher(), now=NOW,
            )
        )

        assert len(outcome.results["a"]) == 2
        assert outcome.stats.errors == ["Dispatch failed for a: mail server down"]

    def test_idempotent(self, app_config: AppConfig, profile_data: dict[str, Any]) -> None:
        def run_once() -> list[dict[str, Any]]:
            client = make_client(upstream, config=app_config.source)
            outcome = asyncio.run(
                run_qualification_pass({"a": profile_data}, config=app_config, client=client, now=NOW)
            )
            return [r.to_dict() for r in outcome.results["a"]]

        assert run_once() == run_once()

    def test_stats_to_dict(self) -> None:
        stats = RunStats(run_id="abc12345")
        stats.finish()
        data = stats.to_dict()

        assert data["run_id"] == "abc12345"
        assert data["duration_seconds"] is not None
        assert isinstance(stats.started_at, datetime)
