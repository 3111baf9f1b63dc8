"""Pipeline orchestration."""

from .runner import (
    Discovery,
    QualificationPass,
    RunStats,
    discover_tenders,
    filter_tenders,
    normalize_results,
    qualify_tender,
    qualify_tenders,
    run_qualification_pass,
    validate_profiles,
)

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
