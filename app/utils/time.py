"""UTC helpers for the naive TIMESTAMP columns"""

from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """
    Current time as a naive UTC datetime.

    All timestamp columns are TIMESTAMP WITHOUT TIME ZONE holding UTC, and
    asyncpg refuses to compare them against aware datetimes.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
