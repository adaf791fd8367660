"""
Date normalization.

Converts any date representation the backend or a form may hand us
into the canonical ``YYYY-MM-DD`` calendar date, always read in UTC.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any

from dateutil import parser as date_parser

from myflix.domain.shared.errors import DateParseError

# Fills fields missing from free-form strings, keeps results stable across days
_PARSE_DEFAULT = datetime(1970, 1, 1)


def normalize_date(value: Any) -> str:
    """Normalize a date representation to ``YYYY-MM-DD``.

    Calendar fields are taken from the UTC instant, never from the local
    timezone, so the result does not depend on where the client runs.

    Args:
        value: ISO-8601 or free-form string, ``datetime`` (naive means UTC),
            ``date``, or epoch milliseconds as ``int``/``float``

    Returns:
        Canonical date string

    Raises:
        DateParseError: If value cannot be read as a calendar instant

    Examples:
        >>> normalize_date("2020-03-01T10:00:00-05:00")
        '2020-03-01'
        >>> normalize_date("1990-07-04T00:00:00.000Z")
        '1990-07-04'
        >>> normalize_date(normalize_date("March 5, 1985"))
        '1985-03-05'
    """
    instant = _to_utc_instant(value)
    return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"


def _to_utc_instant(value: Any) -> datetime:
    if isinstance(value, bool) or value is None:
        raise DateParseError(f"Cannot parse date: {value!r}")

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)

    if isinstance(value, str):
        return _from_string(value)

    raise DateParseError(f"Unsupported date type: {type(value).__name__}")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _from_epoch_millis(millis: float) -> datetime:
    if isinstance(millis, float) and not math.isfinite(millis):
        raise DateParseError(f"Cannot parse date: {millis!r}")
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise DateParseError(f"Date out of range: {millis!r}") from e


def _from_string(text: str) -> datetime:
    cleaned = text.strip()
    if not cleaned:
        raise DateParseError("Cannot parse empty date string")

    try:
        return _as_utc(date_parser.isoparse(cleaned))
    except (ValueError, OverflowError):
        pass

    try:
        return _as_utc(date_parser.parse(cleaned, default=_PARSE_DEFAULT))
    except (ValueError, OverflowError) as e:
        raise DateParseError(f"Cannot parse date: {text!r}") from e
