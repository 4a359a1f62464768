"""Normalization of expiry inputs to an absolute UTC instant.

Accepted shapes:
- datetime: the exact instant the link expires (naive means UTC)
- date: midnight UTC at the start of that day
- timedelta / relativedelta: added to the current time
- int / float / numeric string: number of seconds from now
- string: relative expression ("+1 hour", "30 minutes", "2 days ago",
  "tomorrow") or an absolute date understood by dateutil

Results are truncated to whole seconds to match the ``_expires`` wire format.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from numbers import Real

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from signeduri import clock
from signeduri.errors import InvalidExpiry

Duration = timedelta | relativedelta
ExpiryInput = datetime | date | timedelta | relativedelta | int | float | str

_NUMERIC_RE = re.compile(r"^\s*[+-]?\d+(\.\d+)?\s*$")
_TERM_RE = re.compile(r"([+-]?)\s*(\d+)\s*([a-z]+)")
_RELATIVE_RE = re.compile(r"^(?:\s*[+-]?\s*\d+\s*[a-z]+)+\s*$")

_UNITS = {
    "sec": "seconds", "secs": "seconds", "second": "seconds", "seconds": "seconds",
    "min": "minutes", "mins": "minutes", "minute": "minutes", "minutes": "minutes",
    "hr": "hours", "hrs": "hours", "hour": "hours", "hours": "hours",
    "day": "days", "days": "days",
    "week": "weeks", "weeks": "weeks",
    "month": "months", "months": "months",
    "year": "years", "years": "years",
}


def expires_at(when: datetime) -> datetime:
    """Expire at an exact instant."""
    if not isinstance(when, datetime):
        raise InvalidExpiry(when, "Expected a datetime.")
    try:
        return clock.to_utc(when)
    except (OverflowError, ValueError) as e:
        raise InvalidExpiry(when, str(e)) from e


def expires_in(duration: Duration, now: datetime | None = None) -> datetime:
    """Expire ``duration`` after ``now`` (default: current time)."""
    if not isinstance(duration, (timedelta, relativedelta)):
        raise InvalidExpiry(duration, "Expected a timedelta or relativedelta.")
    now = now or clock.now()
    try:
        return clock.to_utc(now + duration)
    except (OverflowError, ValueError) as e:
        raise InvalidExpiry(duration, str(e)) from e


def expires_in_seconds(seconds: int | float, now: datetime | None = None) -> datetime:
    """Expire ``seconds`` after ``now``; negative values lie in the past."""
    if isinstance(seconds, bool) or not isinstance(seconds, Real):
        raise InvalidExpiry(seconds, "Expected a number of seconds.")
    try:
        duration = timedelta(seconds=float(seconds))
    except (OverflowError, ValueError) as e:
        raise InvalidExpiry(seconds, str(e)) from e
    return expires_in(duration, now)


def parse_relative(text: str) -> relativedelta | None:
    """Parse "+1 week 2 days" / "3 hours ago" style offsets.

    Returns None if ``text`` is not a relative expression.
    """
    text = text.strip().lower()
    negate = text.endswith(" ago")
    if negate:
        text = text[: -len(" ago")]

    if not _RELATIVE_RE.match(text):
        return None

    offsets: dict[str, int] = {}
    for sign, amount, unit in _TERM_RE.findall(text):
        field = _UNITS.get(unit)
        if field is None:
            return None
        value = -int(amount) if sign == "-" else int(amount)
        offsets[field] = offsets.get(field, 0) + value

    delta = relativedelta(**offsets)
    return -delta if negate else delta


def parse_expression(text: str, now: datetime | None = None) -> datetime:
    """Parse a relative or absolute date expression.

    Raises:
        InvalidExpiry: If ``text`` cannot be interpreted
    """
    now = now or clock.now()
    stripped = text.strip().lower()

    if not stripped:
        raise InvalidExpiry(text, "Empty date expression.")

    if _NUMERIC_RE.match(stripped):
        return expires_in_seconds(float(stripped), now)

    midnight = datetime.combine(now.date(), time(0), tzinfo=now.tzinfo)
    keywords = {
        "now": now,
        "today": midnight,
        "midnight": midnight,
        "tomorrow": midnight + timedelta(days=1),
        "yesterday": midnight - timedelta(days=1),
    }
    if stripped in keywords:
        return clock.to_utc(keywords[stripped])

    delta = parse_relative(stripped)
    if delta is not None:
        return expires_in(delta, now)

    try:
        parsed = date_parser.parse(text, default=midnight)
    except (ValueError, OverflowError) as e:
        raise InvalidExpiry(text, f'Could not parse "{text}".') from e

    try:
        return clock.to_utc(parsed)
    except (OverflowError, ValueError) as e:
        raise InvalidExpiry(text, str(e)) from e


def normalize(when: ExpiryInput, now: datetime | None = None) -> datetime:
    """Resolve any accepted expiry shape to an absolute UTC instant.

    Raises:
        InvalidExpiry: If ``when`` is not one of the accepted shapes
    """
    if isinstance(when, bool):
        raise InvalidExpiry(when)

    if isinstance(when, Real):
        return expires_in_seconds(when, now)

    if isinstance(when, str):
        return parse_expression(when, now)

    if isinstance(when, (timedelta, relativedelta)):
        return expires_in(when, now)

    # datetime is a subclass of date, check it first
    if isinstance(when, datetime):
        return expires_at(when)

    if isinstance(when, date):
        return expires_at(datetime.combine(when, time(0)))

    raise InvalidExpiry(when)
