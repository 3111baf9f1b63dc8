"""
Canonical tender model for normalized upstream data.

Maps one OCDS release from the notice-search service onto a Tender. The
mapping is pure: the same release and jurisdiction always give the same
Tender.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from adaptwatch.core.errors import NormalizationError

from .parsing import normalize_whitespace, parse_amount

DEFAULT_NOTICE_URL_TEMPLATE = (
    "https://www.contractsfinder.service.gov.uk/notice/{id}?origin=SearchResults"
)

UNTITLED = "Untitled"
UNKNOWN_BUYER = "Unknown"
UNKNOWN_STATUS = "unknown"


@dataclass(frozen=True)
class PublicTender:
    """Public-safe projection of a Tender, as handed to notification code."""

    id: str
    title: str
    description: str
    buyer: str
    value: float | None
    deadline: str | None
    url: str
    jurisdiction: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Tender:
    """Normalized procurement notice.

    ``deadline`` keeps the upstream string untouched; the deadline
    validator decides whether it is usable.
    """

    id: str
    title: str
    description: str
    buyer: str
    value: float | None
    deadline: str | None
    jurisdiction: str
    url: str

    # Internal-only, not part of the public projection
    status: str = UNKNOWN_STATUS
    currency: str | None = None

    @property
    def text(self) -> str:
        """Title and description joined, used for keyword matching."""
        return f"{self.title} {self.description}"

    def public(self) -> PublicTender:
        """Return the public projection of this tender."""
        return PublicTender(
            id=self.id,
            title=self.title,
            description=self.description,
            buyer=self.buyer,
            value=self.value,
            deadline=self.deadline,
            url=self.url,
            jurisdiction=self.jurisdiction,
        )


def notice_url(tender_id: str, template: str = DEFAULT_NOTICE_URL_TEMPLATE) -> str:
    """Build the deep link to a notice on the upstream service."""
    return template.format(id=tender_id)


def normalize_release(
    raw: dict[str, Any],
    jurisdiction: str,
    *,
    url_template: str = DEFAULT_NOTICE_URL_TEMPLATE,
) -> Tender:
    """Normalize one upstream release to a Tender.

    Args:
        raw: OCDS release dictionary
        jurisdiction: Location label the release was retrieved under
        url_template: Notice deep-link pattern

    Returns:
        Tender with defaults substituted for missing optional fields

    Raises:
        NormalizationError: If the release has no identifier
    """
    if not isinstance(raw, dict):
        raise NormalizationError(f"Release is not an object: {type(raw).__name__}")

    ocid = raw.get("ocid")
    if ocid is None or not str(ocid).strip():
        raise NormalizationError("Release has no ocid")
    tender_id = str(ocid).strip()

    tender = _get_dict(raw, "tender")
    buyer = _get_dict(raw, "buyer")
    value = _get_dict(tender, "value")

    title = normalize_whitespace(tender.get("title")) or UNTITLED
    description = str(tender.get("description") or "").strip()
    buyer_name = normalize_whitespace(buyer.get("name")) or UNKNOWN_BUYER

    currency = value.get("currency")

    return Tender(
        id=tender_id,
        title=title,
        description=description,
        buyer=buyer_name,
        value=parse_amount(value.get("amount")),
        deadline=_select_deadline(tender),
        jurisdiction=jurisdiction,
        url=notice_url(tender_id, url_template),
        status=str(tender.get("status") or UNKNOWN_STATUS),
        currency=str(currency) if currency else None,
    )


def _select_deadline(tender: dict[str, Any]) -> str | None:
    """Enquiry-period end date first, then tender-period end date."""
    for period_key in ("enquiryPeriod", "tenderPeriod"):
        end_date = _get_dict(tender, period_key).get("endDate")
        if end_date:
            return str(end_date)
    return None


def _get_dict(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Get a nested object, treating anything that is not a dict as absent."""
    value = data.get(key)
    return value if isinstance(value, dict) else {}
