"""Source of "now" for expiry handling.

Provides the current UTC time truncated to whole seconds (the resolution
of the ``_expires`` wire format) and a frozen-time override for tests.

Usage in tests:
    with frozen_time(datetime(2030, 1, 1, tzinfo=UTC)):
        uri = sign("https://example.com", "secret").expires(60).create()
"""

from __future__ import annotations

import contextlib
import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

# Thread-local state for frozen time
_state = threading.local()

FIXED_NOW = datetime(2025, 1, 1, 0, 0, 0, tzinfo=UTC)


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime with whole seconds.

    Naive datetimes are interpreted as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).replace(microsecond=0)


def is_frozen() -> bool:
    """Check if frozen time is active."""
    return getattr(_state, "frozen_at", None) is not None


def now() -> datetime:
    """Return current UTC time, or the frozen instant."""
    frozen_at = getattr(_state, "frozen_at", None)
    if frozen_at is not None:
        return frozen_at
    return to_utc(datetime.now(UTC))


def timestamp() -> int:
    """Return ``now()`` as integer epoch seconds."""
    return int(now().timestamp())


@contextlib.contextmanager
def frozen_time(at: datetime | None = None) -> Generator[datetime, None, None]:
    """Context manager fixing ``now()`` to ``at`` (default ``FIXED_NOW``)."""
    prev = getattr(_state, "frozen_at", None)
    _state.frozen_at = to_utc(at or FIXED_NOW)
    try:
        yield _state.frozen_at
    finally:
        _state.frozen_at = prev
