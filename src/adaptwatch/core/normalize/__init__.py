"""Normalization and de-duplication of upstream notices."""

from .parsing import (
    normalize_whitespace,
    parse_amount,
    parse_iso_timestamp,
    parse_since,
)
from .canonical import (
    DEFAULT_NOTICE_URL_TEMPLATE,
    PublicTender,
    Tender,
    normalize_release,
    notice_url,
)
from .dedupe import dedupe_tenders

__all__ = [
    # Parsing
    "normalize_whitespace",
    "parse_amount",
    "parse_iso_timestamp",
    "parse_since",
    # Canonical
    "DEFAULT_NOTICE_URL_TEMPLATE",
    "PublicTender",
    "Tender",
    "normalize_release",
    "notice_url",
    # Dedupe
    "dedupe_tenders",
]
