"""UTC helpers: every timestamp inside the analytics is timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC).

    ``None`` resolves to the current time, which is how the analytics pick
    their evaluation time when the caller does not pin one.
    """
    if value is None:
        return utc_now()
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
