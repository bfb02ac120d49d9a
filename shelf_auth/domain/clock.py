"""Timezone-aware clock shared by the domain models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time in UTC (aware)."""
    return datetime.now(timezone.utc)
