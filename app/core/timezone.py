"""
Timezone Utilities - all timestamps are stored in UTC
"""
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)
