"""UTC normalisation for timestamps entering the domain."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_moment(now: datetime | None = None) -> datetime:
    """Return ``now`` as an aware UTC datetime.

    ``None`` means the current time.  A naive datetime is taken to be UTC
    already; an aware one is converted.
    """
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)
