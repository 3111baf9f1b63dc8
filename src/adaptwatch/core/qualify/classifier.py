"""
Tri-state qualification status.

Gates are applied before the score is looked at:

1. Hard gate: insurance below the minimum or experience below one year
   gives ``disqualified`` whatever the score.
2. Soft gate: a missing safeguarding, DBS or health & safety item caps
   the result at ``conditional``.
3. Otherwise the score decides.
"""

from __future__ import annotations

from enum import Enum

from adaptwatch.core.config.models import ScoringConfig

from .profile import CapabilityProfile


class QualificationStatus(str, Enum):
    """Recommendation for one tender and profile."""

    QUALIFIED = "qualified"
    CONDITIONAL = "conditional"
    DISQUALIFIED = "disqualified"


def fails_hard_gate(profile: CapabilityProfile, config: ScoringConfig | None = None) -> bool:
    config = config or ScoringConfig()
    return (
        profile.public_liability_insurance < config.minimum_insurance
        or profile.years_of_relevant_experience < config.minimum_experience_years
    )


def fails_soft_gate(profile: CapabilityProfile) -> bool:
    return not (
        profile.has_safeguarding_policy
        and profile.has_enhanced_background_checks
        and profile.has_health_safety_policy
    )


def classify(
    score: int,
    profile: CapabilityProfile,
    config: ScoringConfig | None = None,
) -> QualificationStatus:
    """Combine gates and score into a status."""
    config = config or ScoringConfig()

    if fails_hard_gate(profile, config):
        return QualificationStatus.DISQUALIFIED
    if fails_soft_gate(profile):
        return QualificationStatus.CONDITIONAL
    if score >= config.qualified_threshold:
        return QualificationStatus.QUALIFIED
    if score >= config.conditional_threshold:
        return QualificationStatus.CONDITIONAL
    return QualificationStatus.DISQUALIFIED
