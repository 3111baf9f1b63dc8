"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from adaptwatch.core.backends import HttpBackend
from adaptwatch.core.config import AppConfig, SourceConfig
from adaptwatch.core.fetch import RetryConfig
from adaptwatch.core.normalize import Tender, notice_url
from adaptwatch.core.qualify import CapabilityProfile, load_profile
from adaptwatch.core.sources import ContractsFinderClient

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def make_tender(**overrides: Any) -> Tender:
    """Build a relevant, open tender with sensible defaults."""
    tender_id = overrides.pop("id", "ocds-b5fd17-0001")
    fields: dict[str, Any] = {
        "id": tender_id,
        "title": "Disabled Facilities Grant adaptation works",
        "description": "Stairlift and level access shower installations in council homes.",
        "buyer": "Birmingham City Council",
        "value": 100_000.0,
        "deadline": "2026-11-01T12:00:00Z",
        "jurisdiction": "Birmingham",
        "url": notice_url(tender_id),
    }
    fields.update(overrides)
    return Tender(**fields)


def make_release(ocid: str | None = "ocds-b5fd17-0001", **tender_fields: Any) -> dict[str, Any]:
    """Build an OCDS release dictionary as returned by the search service."""
    tender: dict[str, Any] = {
        "title": "Level access shower installations",
        "description": "Home adaptation works for disabled residents.",
        "status": "active",
        "value": {"amount": 120000, "currency": "GBP"},
        "tenderPeriod": {"endDate": "2026-11-15T12:00:00Z"},
    }
    tender.update(tender_fields)
    release: dict[str, Any] = {
        "tender": tender,
        "buyer": {"name": "Dudley Metropolitan Borough Council"},
    }
    if ocid is not None:
        release["ocid"] = ocid
    return release


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"content-type": "application/json"},
    )


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    config: SourceConfig | None = None,
    max_attempts: int = 1,
) -> ContractsFinderClient:
    """Client whose HTTP traffic is answered by ``handler``."""
    backend = HttpBackend(
        retry=RetryConfig(max_attempts=max_attempts, min_wait=0, max_wait=0, jitter=False),
        transport=httpx.MockTransport(handler),
    )
    return ContractsFinderClient(config or SourceConfig(), backend=backend)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def profile_data() -> dict[str, Any]:
    """A fully compliant profile, as a signup form would store it."""
    return {
        "turnover": 400_000,
        "publicLiabilityInsurance": 5_000_000,
        "yearsOfRelevantExperience": 6,
        "hasSafeguardingPolicy": True,
        "hasEnhancedBackgroundChecks": True,
        "hasHealthSafetyPolicy": True,
        "jurisdiction": "Leeds",
    }


@pytest.fixture
def profile(profile_data: dict[str, Any]) -> CapabilityProfile:
    """Validated compliant profile with no accreditations."""
    return load_profile(profile_data)


@pytest.fixture
def tender() -> Tender:
    """Relevant open tender valued at 100,000."""
    return make_tender()


@pytest.fixture
def app_config() -> AppConfig:
    """Config with two jurisdictions and no file logging."""
    return AppConfig.model_validate(
        {
            "source": {"jurisdictions": ["Birmingham", "Dudley"], "concurrency": 2},
            "logging": {"file": None, "rich_console": False},
        }
    )
