"""Tests for capability profile validation."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from adaptwatch.core.errors import ProfileError
from adaptwatch.core.qualify import CapabilityProfile, load_profile


class TestLoadProfile:
    """Tests for load_profile function."""

    def test_camel_case_fields(self, profile_data: dict[str, Any]) -> None:
        profile = load_profile(profile_data)

        assert profile.turnover == 400_000
        assert profile.public_liability_insurance == 5_000_000
        assert profile.years_of_relevant_experience == 6
        assert profile.has_safeguarding_policy is True
        assert profile.jurisdiction == "Leeds"

    def test_snake_case_fields(self) -> None:
        profile = load_profile(
            {
                "turnover": 1,
                "public_liability_insurance": 2,
                "years_of_relevant_experience": 3,
                "has_safeguarding_policy": False,
                "has_enhanced_background_checks": True,
                "has_health_safety_policy": False,
                "has_chas": True,
            }
        )

        assert profile.public_liability_insurance == 2
        assert profile.has_enhanced_background_checks is True
        assert profile.has_chas is True

    def test_short_signup_names(self) -> None:
        """Older signup records use abbreviated keys."""
        profile = load_profile(
            {
                "turnover": 250000,
                "publicLiability": 5000000,
                "yearsAdaptations": 4,
                "hasSafeguarding": True,
                "hasDBSChecks": True,
                "hasHealthSafety": True,
                "hasCHAS": True,
                "hasSMAS": True,
                "location": "Coventry",
            }
        )

        assert profile.years_of_relevant_experience == 4
        assert profile.has_smas is True
        assert profile.jurisdiction == "Coventry"

    def test_accreditations_default_false(self, profile: CapabilityProfile) -> None:
        assert not any(
            (profile.has_chas, profile.has_smas, profile.has_constructionline, profile.has_safe_contractor)
        )

    def test_unknown_fields_ignored(self, profile_data: dict[str, Any]) -> None:
        profile = load_profile({**profile_data, "companyName": "Acme Adaptations Ltd"})
        assert not hasattr(profile, "companyName")

    def test_missing_required_field(self, profile_data: dict[str, Any]) -> None:
        del profile_data["publicLiabilityInsurance"]

        with pytest.raises(ProfileError) as exc_info:
            load_profile(profile_data, account_id="acme@example.com")

        error = exc_info.value
        assert error.account_id == "acme@example.com"
        assert any("public_liability_insurance" in detail for detail in error.details)
        assert "acme@example.com" in str(error)

    def test_negative_turnover_rejected(self, profile_data: dict[str, Any]) -> None:
        with pytest.raises(ProfileError):
            load_profile({**profile_data, "turnover": -1})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ProfileError):
            load_profile(["not", "a", "profile"])

    def test_existing_profile_passthrough(self, profile: CapabilityProfile) -> None:
        assert load_profile(profile) is profile

    def test_profile_is_read_only(self, profile: CapabilityProfile) -> None:
        with pytest.raises(ValidationError):
            profile.turnover = 1  # type: ignore[misc]
