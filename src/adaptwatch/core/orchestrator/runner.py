"""
Discovery and qualification runner.

Coordinates the full workflow:
fetch → normalize → dedupe → relevance → deadline → score → classify → rank.

Only the fetch step does I/O. Everything after it is a pure function of
the fetched releases, the configuration and the evaluation time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Sequence
from uuid import uuid4

from adaptwatch.core.config.models import AppConfig, ScoringConfig
from adaptwatch.core.errors import NormalizationError
from adaptwatch.core.filters.deadline import has_future_deadline
from adaptwatch.core.filters.relevance import RelevanceClassifier
from adaptwatch.core.interfaces import NotificationDispatcher, ProfileStore
from adaptwatch.core.logging import get_contextual_logger, get_logger
from adaptwatch.core.normalize.canonical import (
    DEFAULT_NOTICE_URL_TEMPLATE,
    Tender,
    normalize_release,
)
from adaptwatch.core.normalize.dedupe import dedupe_tenders
from adaptwatch.core.normalize.parsing import parse_since
from adaptwatch.core.qualify.classifier import classify
from adaptwatch.core.qualify.profile import CapabilityProfile, load_profile
from adaptwatch.core.qualify.result import QualificationResult, rank_results
from adaptwatch.core.qualify.scoring import score_tender
from adaptwatch.core.sources.contracts_finder import ContractsFinderClient, JurisdictionResult

logger = get_logger("runner")


@dataclass
class RunStats:
    """Statistics for a discovery/qualification run."""

    run_id: str = field(default_factory=lambda: uuid4().hex[:8])

    jurisdictions_queried: int = 0
    jurisdictions_failed: int = 0
    releases_fetched: int = 0
    releases_skipped: int = 0
    tenders_normalized: int = 0
    duplicates_dropped: int = 0
    irrelevant_dropped: int = 0
    expired_dropped: int = 0
    tenders_kept: int = 0
    profiles_evaluated: int = 0

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float | None:
        """Get run duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def finish(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "run_id": self.run_id,
            "jurisdictions_queried": self.jurisdictions_queried,
            "jurisdictions_failed": self.jurisdictions_failed,
            "releases_fetched": self.releases_fetched,
            "releases_skipped": self.releases_skipped,
            "tenders_normalized": self.tenders_normalized,
            "duplicates_dropped": self.duplicates_dropped,
            "irrelevant_dropped": self.irrelevant_dropped,
            "expired_dropped": self.expired_dropped,
            "tenders_kept": self.tenders_kept,
            "profiles_evaluated": self.profiles_evaluated,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class Discovery:
    """Tenders that survived filtering, with the stats of the run."""

    tenders: list[Tender]
    stats: RunStats


@dataclass
class QualificationPass:
    """Ranked results per account for one scheduled pass."""

    results: dict[str, list[QualificationResult]]
    stats: RunStats
    tenders: list[Tender] = field(default_factory=list)


# =============================================================================
# Pure stages
# =============================================================================


def normalize_results(
    results: Sequence[JurisdictionResult],
    *,
    url_template: str = DEFAULT_NOTICE_URL_TEMPLATE,
    stats: RunStats | None = None,
) -> list[Tender]:
    """Normalize every release, concatenated in jurisdiction order.

    Releases without an identifier are skipped with a warning.
    """
    stats = stats or RunStats()
    tenders: list[Tender] = []

    for result in results:
        stats.jurisdictions_queried += 1
        if not result.ok:
            stats.jurisdictions_failed += 1
            stats.warnings.append(f"{result.jurisdiction}: {result.error}")

        log = get_contextual_logger("runner", jurisdiction=result.jurisdiction, run_id=stats.run_id)
        for raw in result.releases:
            stats.releases_fetched += 1
            try:
                tender = normalize_release(raw, result.jurisdiction, url_template=url_template)
            except NormalizationError as e:
                stats.releases_skipped += 1
                log.warning("Skipping release: %s", e)
                continue
            tenders.append(tender)

    stats.tenders_normalized += len(tenders)
    return tenders


def filter_tenders(
    tenders: Iterable[Tender],
    *,
    classifier: RelevanceClassifier,
    now: datetime,
    stats: RunStats | None = None,
) -> list[Tender]:
    """Dedupe, then keep relevant tenders whose deadline is still ahead."""
    stats = stats or RunStats()
    tenders = list(tenders)

    unique = dedupe_tenders(tenders)
    stats.duplicates_dropped += len(tenders) - len(unique)

    kept: list[Tender] = []
    for tender in unique:
        decision = classifier.explain(tender)
        if not decision.relevant:
            stats.irrelevant_dropped += 1
            logger.debug("Dropped %s (%s): %s", tender.id, tender.title, decision.reason)
            continue
        if not has_future_deadline(tender, now):
            stats.expired_dropped += 1
            logger.debug("Dropped %s (%s): deadline %s", tender.id, tender.title, tender.deadline)
            continue
        kept.append(tender)

    stats.tenders_kept += len(kept)
    return kept


def qualify_tender(
    tender: Tender,
    profile: CapabilityProfile,
    config: ScoringConfig | None = None,
) -> QualificationResult:
    """Score and classify one tender for one profile."""
    card = score_tender(tender, profile, config)
    return QualificationResult(
        tender=tender.public(),
        score=card.score,
        status=classify(card.score, profile, config),
        passes=card.passes,
        issues=card.issues,
    )


def qualify_tenders(
    tenders: Iterable[Tender],
    profile: CapabilityProfile,
    config: ScoringConfig | None = None,
    *,
    top_n: int | None = None,
) -> list[QualificationResult]:
    """Qualify every tender for a profile and rank the results."""
    return rank_results(
        (qualify_tender(tender, profile, config) for tender in tenders),
        top_n=top_n,
    )


def validate_profiles(profiles: Mapping[str, Any]) -> dict[str, CapabilityProfile]:
    """Validate every profile record, failing on the first bad one.

    Raises:
        ProfileError: If a record is missing required fields
    """
    validated: dict[str, CapabilityProfile] = {}
    for account_id, data in profiles.items():
        validated[account_id] = load_profile(data, account_id=account_id)
    return validated


# =============================================================================
# Entry points
# =============================================================================


async def discover_tenders(
    config: AppConfig | None = None,
    *,
    client: ContractsFinderClient | None = None,
    published_since: date | str | None = None,
    now: datetime | None = None,
    stats: RunStats | None = None,
) -> Discovery:
    """Fetch, normalize, dedupe and filter tenders for every jurisdiction.

    Args:
        config: Application configuration
        client: Source client (default: built from config.source)
        published_since: Lower bound on publication date (default: lookback window)
        now: Evaluation time for deadlines (default: current UTC time)
        stats: Stats object to fill in (default: a new one)

    Returns:
        Discovery with surviving tenders in discovery order
    """
    config = config or AppConfig()
    stats = stats or RunStats()
    now = now or datetime.now(timezone.utc)
    since = parse_since(
        published_since,
        default_days=config.source.published_within_days,
        relative_base=now,
    )

    owns_client = client is None
    client = client or ContractsFinderClient(config.source, run_id=stats.run_id)

    logger.info(
        "Searching %d jurisdictions for notices published since %s",
        len(config.source.jurisdictions),
        since.isoformat(),
    )

    try:
        results = await client.search_all(
            config.source.jurisdictions,
            keywords=config.source.keyword_query,
            published_since=since,
        )
    finally:
        if owns_client:
            await client.close()

    tenders = normalize_results(
        results,
        url_template=config.source.notice_url_template,
        stats=stats,
    )
    kept = filter_tenders(
        tenders,
        classifier=RelevanceClassifier(config.relevance),
        now=now,
        stats=stats,
    )

    logger.info(
        "Kept %d of %d tenders (%d duplicates, %d irrelevant, %d expired)",
        len(kept),
        stats.tenders_normalized,
        stats.duplicates_dropped,
        stats.irrelevant_dropped,
        stats.expired_dropped,
    )
    return Discovery(tenders=kept, stats=stats)


async def run_qualification_pass(
    profiles: Mapping[str, Any] | ProfileStore,
    *,
    config: AppConfig | None = None,
    client: ContractsFinderClient | None = None,
    dispatcher: NotificationDispatcher | None = None,
    published_since: date | str | None = None,
    now: datetime | None = None,
) -> QualificationPass:
    """Run one qualification pass for one or more profiles.

    Profiles are validated before anything is fetched. Discovery runs
    once and its tenders are scored for every profile. The pass holds no
    state between calls, so re-running it gives the same results for the
    same upstream data.

    Args:
        profiles: Raw profile records (or CapabilityProfile objects) keyed by account id,
            or a ProfileStore to read them from
        config: Application configuration
        client: Source client (default: built from config.source)
        dispatcher: Receives each account's ranked results, if given
        published_since: Lower bound on publication date
        now: Evaluation time for deadlines

    Returns:
        QualificationPass with ranked results per account

    Raises:
        ProfileError: If any profile is invalid
    """
    config = config or AppConfig()
    if isinstance(profiles, ProfileStore):
        profiles = profiles.load_profiles()
    validated = validate_profiles(profiles)

    stats = RunStats()
    discovery = await discover_tenders(
        config,
        client=client,
        published_since=published_since,
        now=now,
        stats=stats,
    )

    results: dict[str, list[QualificationResult]] = {}
    for account_id, profile in validated.items():
        ranked = qualify_tenders(
            discovery.tenders,
            profile,
            config.scoring,
            top_n=config.results.top_n,
        )
        results[account_id] = ranked
        stats.profiles_evaluated += 1

        if dispatcher is None:
            continue
        try:
            dispatcher.dispatch(account_id, ranked)
        except Exception as e:
            stats.errors.append(f"Dispatch failed for {account_id}: {e}")
            logger.exception("Dispatch failed for %s", account_id)

    stats.finish()
    logger.info(
        "Qualification pass %s finished: %d profiles, %d tenders",
        stats.run_id,
        stats.profiles_evaluated,
        len(discovery.tenders),
    )
    return QualificationPass(results=results, stats=stats, tenders=discovery.tenders)


__all__ = [
    "Discovery",
    "QualificationPass",
    "RunStats",
    "discover_tenders",
    "filter_tenders",
    "normalize_results",
    "qualify_tender",
    "qualify_tenders",
    "run_qualification_pass",
    "validate_profiles",
]
