"""
Deadline validation.

Fail-closed: a tender without a usable deadline is dropped rather than
assumed to be open.
"""

from __future__ import annotations

from datetime import datetime, timezone

from adaptwatch.core.normalize.canonical import Tender
from adaptwatch.core.normalize.parsing import parse_iso_timestamp


def deadline_of(tender: Tender) -> datetime | None:
    """Parsed UTC deadline of a tender, or None when missing or malformed."""
    return parse_iso_timestamp(tender.deadline)


def has_future_deadline(tender: Tender, now: datetime | None = None) -> bool:
    """True iff the deadline parses and is strictly later than ``now``.

    Args:
        tender: Tender to check
        now: Evaluation time; naive values are taken as UTC

    Returns:
        Whether the tender is still open for responses
    """
    deadline = deadline_of(tender)
    if deadline is None:
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return deadline > now
