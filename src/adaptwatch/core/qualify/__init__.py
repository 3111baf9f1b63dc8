"""Scoring and classification of tenders against contractor profiles."""

from .profile import ACCREDITATIONS, CapabilityProfile, load_profile
from .scoring import ScoreCard, is_local, score_tender
from .classifier import QualificationStatus, classify, fails_hard_gate, fails_soft_gate
from .result import QualificationResult, rank_results

__all__ = [
    # Profile
    "ACCREDITATIONS",
    "CapabilityProfile",
    "load_profile",
    # Scoring
    "ScoreCard",
    "is_local",
    "score_tender",
    # Classification
    "QualificationStatus",
    "classify",
    "fails_hard_gate",
    "fails_soft_gate",
    # Results
    "QualificationResult",
    "rank_results",
]
