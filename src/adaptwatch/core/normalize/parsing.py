"""
Parsing utilities for normalizing upstream data.

Handles deadline timestamps, monetary amounts and the "published since"
date used to bound upstream queries.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import dateparser


# =============================================================================
# Timestamp Parsing
# =============================================================================


def parse_iso_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts full timestamps ("2026-11-01T12:00:00Z", offsets included)
    and bare dates ("2026-11-01", read as midnight UTC). Naive values are
    taken as UTC. Anything else returns None; no guessing is attempted.

    Args:
        value: String, datetime or date

    Returns:
        Aware datetime in UTC, or None if the value is unusable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_since(
    value: str | date | None,
    *,
    default_days: int = 90,
    relative_base: datetime | None = None,
) -> date:
    """Resolve the "published since" date for upstream queries.

    Handles:
    - None (``default_days`` before the base date)
    - date objects
    - ISO dates ("2026-07-01")
    - Natural language ("30 days ago", "1 July 2026") via dateparser

    Args:
        value: Date, text or None
        default_days: Lookback used when value is None
        relative_base: Base datetime for relative parsing (default: now, UTC)

    Returns:
        Calendar date (no time component)

    Raises:
        ValueError: If the text cannot be understood as a date
    """
    base = relative_base or datetime.now(timezone.utc)

    if value is None:
        return (base - timedelta(days=default_days)).date()

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip()
    parsed = parse_iso_timestamp(text)
    if parsed is not None:
        return parsed.date()

    settings = {
        "PREFER_DATES_FROM": "past",
        "DATE_ORDER": "DMY",
        "RETURN_AS_TIMEZONE_AWARE": False,
        "RELATIVE_BASE": base.replace(tzinfo=None),
    }
    result = dateparser.parse(text, settings=settings)
    if result is None:
        raise ValueError(f"Cannot parse date: {value!r}")
    return result.date()


# =============================================================================
# Money Parsing
# =============================================================================


def parse_amount(value: Any) -> float | None:
    """Parse a monetary amount with no currency conversion.

    Numbers pass through; numeric strings may carry thousands separators.
    Zero, negative, non-finite or unparseable values give None, since an
    upstream amount of 0 means the value was not published.

    Args:
        value: Raw amount from upstream

    Returns:
        Positive float, or None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        amount = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            amount = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None

    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


# =============================================================================
# Utility Functions
# =============================================================================


def normalize_whitespace(text: str | None) -> str:
    """Normalize whitespace in text."""
    if text is None:
        return ""
    return " ".join(str(text).split())
