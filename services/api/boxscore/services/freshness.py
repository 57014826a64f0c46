"""Freshness policy for stored games."""

from datetime import datetime, timedelta


def is_fresh(updated_at: datetime | None, now: datetime, window: timedelta) -> bool:
    """Return True if a record written at `updated_at` can still be served at `now`.

    A record that was never written (no timestamp) is never fresh. The window
    edge counts as fresh.
    """
    if updated_at is None:
        return False
    return now - updated_at <= window
