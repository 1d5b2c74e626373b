"""
Date helpers shared by repositories and market-data clients.
"""

from datetime import UTC, date, datetime, timedelta


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Replaces deprecated datetime.utcnow() which is scheduled for removal in Python 3.14.
    See: https://docs.python.org/3/library/datetime.html#datetime.datetime.utcnow
    """
    return datetime.now(UTC)


def utcfromtimestamp(timestamp: float) -> datetime:
    """
    Return timezone-aware UTC datetime from POSIX timestamp.

    Replaces deprecated datetime.utcfromtimestamp() which is scheduled for removal.
    See: https://docs.python.org/3/library/datetime.html#datetime.datetime.utcfromtimestamp
    """
    return datetime.fromtimestamp(timestamp, UTC)


def lookback_date_range(
    days: int, reference_date: date | None = None
) -> tuple[str, str]:
    """
    Build a (from, to) pair of YYYY-MM-DD strings ending at the reference date.

    Args:
        days: Number of days to look back
        reference_date: End of the range (defaults to today, UTC)

    Returns:
        Tuple of (from_date, to_date) strings
    """
    end = reference_date or utcnow().date()
    start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()
