"""
Tender de-duplication across jurisdiction result sets.

The same notice is often returned for several neighbouring jurisdictions.
Only its first occurrence is kept.
"""

from __future__ import annotations

from typing import Iterable

from .canonical import Tender


def dedupe_tenders(tenders: Iterable[Tender]) -> list[Tender]:
    """Keep the first tender seen for each id, preserving input order.

    Callers pass tenders concatenated in jurisdiction-list order, so the
    surviving copy carries the earliest jurisdiction.
    """
    seen: set[str] = set()
    unique: list[Tender] = []
    for tender in tenders:
        if tender.id in seen:
            continue
        seen.add(tender.id)
        unique.append(tender)
    return unique
