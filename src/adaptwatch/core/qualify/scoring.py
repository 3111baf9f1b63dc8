"""
Weighted rule scoring of a tender against a capability profile.

Rules run in a fixed order. Each adds its delta to the score and appends
one message to ``passes`` or ``issues``:

    turnover vs tender value   >=3x +10, >=1.5x +5, >=1x +2, >=0.5x -3, else -10
    public liability cover     >= minimum +15, else -20
    years of experience        >=5 +10, >=3 +5, >=1 -5, else -15
    safeguarding policy        +8 / -15
    enhanced DBS checks        +8 / -10
    health & safety policy     +7 / -8
    each accreditation held    +5
    local to the jurisdiction  +3

Turnover is only scored when the tender has a published value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from adaptwatch.core.config.models import ScoringConfig
from adaptwatch.core.normalize.canonical import Tender

from .profile import ACCREDITATIONS, CapabilityProfile

ACCREDITATION_BONUS = 5
LOCAL_BONUS = 3


@dataclass
class ScoreCard:
    """Score and explanations for one (tender, profile) pair."""

    score: int = 0
    passes: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)

    def passed(self, delta: int, message: str) -> None:
        self.score += delta
        self.passes.append(message)

    def failed(self, delta: int, message: str) -> None:
        self.score += delta
        self.issues.append(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "passes": list(self.passes),
            "issues": list(self.issues),
        }


def score_tender(
    tender: Tender,
    profile: CapabilityProfile,
    config: ScoringConfig | None = None,
) -> ScoreCard:
    """Evaluate every scoring rule for a tender and profile.

    Args:
        tender: Normalized tender
        profile: Validated capability profile
        config: Scoring configuration (insurance minimum)

    Returns:
        ScoreCard with the summed score and ordered messages
    """
    config = config or ScoringConfig()
    card = ScoreCard()

    if tender.value is not None:
        _score_turnover(card, profile.turnover, tender.value)

    minimum = config.minimum_insurance
    if profile.public_liability_insurance >= minimum:
        card.passed(15, f"You have required {_money(minimum)} public liability insurance")
    else:
        card.failed(-20, f"You need {_money(minimum)} public liability insurance")

    _score_experience(card, profile.years_of_relevant_experience)

    if profile.has_safeguarding_policy:
        card.passed(8, "You have a safeguarding policy")
    else:
        card.failed(-15, "Missing safeguarding policy")

    if profile.has_enhanced_background_checks:
        card.passed(8, "Your staff have enhanced DBS checks")
    else:
        card.failed(-10, "Staff need enhanced DBS checks")

    if profile.has_health_safety_policy:
        card.passed(7, "You have CDM 2015 compliant Health & Safety Policy")
    else:
        card.failed(-8, "Missing Health & Safety Policy (CDM 2015)")

    for attribute, message in ACCREDITATIONS:
        if getattr(profile, attribute):
            card.passed(ACCREDITATION_BONUS, message)

    if is_local(tender, profile):
        card.passed(LOCAL_BONUS, f"Local to {tender.jurisdiction}")

    return card


def is_local(tender: Tender, profile: CapabilityProfile) -> bool:
    """Profile locality contains the tender's jurisdiction (case-insensitive)."""
    if not tender.jurisdiction:
        return False
    return tender.jurisdiction.lower() in profile.jurisdiction.lower()


def _score_turnover(card: ScoreCard, turnover: float, value: float) -> None:
    if turnover >= 3 * value:
        card.passed(10, f"Your turnover ({_money(turnover)}) exceeds 3x contract value")
    elif turnover >= 1.5 * value:
        card.passed(5, "Your turnover covers contract value with good margin")
    elif turnover >= value:
        card.passed(2, "Your turnover matches contract value")
    elif turnover >= 0.5 * value:
        card.failed(-3, "Your turnover is below contract value - risky")
    else:
        card.failed(-10, "Your turnover is far below this contract value")


def _score_experience(card: ScoreCard, years: float) -> None:
    shown = _number(years)
    if years >= 5:
        card.passed(10, f"{shown} years experience in adaptation work")
    elif years >= 3:
        card.passed(5, f"{shown} years experience")
    elif years >= 1:
        card.failed(-5, f"Only {shown} year(s) experience (5+ preferred)")
    else:
        card.failed(-15, "Insufficient experience in adaptation work")


def _number(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def _money(amount: float) -> str:
    if float(amount).is_integer():
        return f"£{amount:,.0f}"
    return f"£{amount:,.2f}"
