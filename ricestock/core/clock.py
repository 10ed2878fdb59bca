"""Wall-clock helpers. All stored timestamps are naive UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)
