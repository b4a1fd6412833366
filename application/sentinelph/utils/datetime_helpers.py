"""
Utility functions for date and time handling.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo
PHT = ZoneInfo("Asia/Manila")


def get_pht_now() -> datetime:
    """
    Get current datetime in Philippine time.
    Returns:
        Current datetime object with Asia/Manila timezone
    """
    return datetime.now(PHT)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes so they compare against aware ones.

    Firestore returns aware UTC timestamps; values parsed from JSON or
    created in tests may be naive.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse ISO strings (including a trailing Z) or pass datetimes through.

    Returns:
        Timezone-aware datetime or None when the value cannot be parsed
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str) and value.strip():
        try:
            return ensure_aware(datetime.fromisoformat(value.replace('Z', '+00:00')))
        except ValueError:
            return None
    return None
