"""
Contractor capability profile.

Profiles are owned by an external profile store; this module only
validates them. Field names are accepted in snake_case, in camelCase,
and under the short names older signup forms used.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from adaptwatch.core.errors import ProfileError


class CapabilityProfile(BaseModel):
    """A contractor's self-declared qualifications."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # Numeric
    turnover: float = Field(..., ge=0, description="Annual turnover")
    public_liability_insurance: float = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices(
            "public_liability_insurance", "publicLiabilityInsurance", "publicLiability"
        ),
        description="Public liability cover",
    )
    years_of_relevant_experience: float = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices(
            "years_of_relevant_experience", "yearsOfRelevantExperience", "yearsAdaptations"
        ),
        description="Years of adaptation work",
    )

    # Policies
    has_safeguarding_policy: bool = Field(
        ...,
        validation_alias=AliasChoices(
            "has_safeguarding_policy", "hasSafeguardingPolicy", "hasSafeguarding"
        ),
    )
    has_enhanced_background_checks: bool = Field(
        ...,
        validation_alias=AliasChoices(
            "has_enhanced_background_checks", "hasEnhancedBackgroundChecks", "hasDBSChecks"
        ),
    )
    has_health_safety_policy: bool = Field(
        ...,
        validation_alias=AliasChoices(
            "has_health_safety_policy", "hasHealthSafetyPolicy", "hasHealthSafety"
        ),
    )

    # Accreditations
    has_chas: bool = Field(default=False, validation_alias=AliasChoices("has_chas", "hasCHAS"))
    has_smas: bool = Field(default=False, validation_alias=AliasChoices("has_smas", "hasSMAS"))
    has_constructionline: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_constructionline", "hasConstructionline"),
    )
    has_safe_contractor: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_safe_contractor", "hasSafeContractor"),
    )

    jurisdiction: str = Field(
        default="",
        validation_alias=AliasChoices("jurisdiction", "location"),
        description="Free-text locality used for the proximity bonus",
    )


# Accreditation field -> message shown when held, in scoring order
ACCREDITATIONS: tuple[tuple[str, str], ...] = (
    ("has_chas", "CHAS accreditation"),
    ("has_smas", "SMAS accreditation"),
    ("has_constructionline", "Constructionline registration"),
    ("has_safe_contractor", "SafeContractor accreditation"),
)


def load_profile(data: Any, account_id: str | None = None) -> CapabilityProfile:
    """Validate raw profile data.

    Args:
        data: Mapping from the profile store (or an existing profile)
        account_id: Account the profile belongs to, for error reporting

    Returns:
        Validated CapabilityProfile

    Raises:
        ProfileError: If required fields are missing or invalid
    """
    if isinstance(data, CapabilityProfile):
        return data

    if not isinstance(data, dict):
        raise ProfileError("Profile must be a mapping", account_id=account_id)

    try:
        return CapabilityProfile.model_validate(data)
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        label = f"Invalid profile for {account_id}" if account_id else "Invalid profile"
        raise ProfileError(label, account_id=account_id, details=details) from e
