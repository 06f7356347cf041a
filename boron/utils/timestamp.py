"""Timestamp helpers."""

from datetime import datetime, timezone


def now() -> str:
    """Current local time, second precision (e.g., '2025-11-13 18:45:40')."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def now_exact() -> str:
    """Current UTC time as an ISO 8601 string with microseconds."""
    return datetime.now(timezone.utc).isoformat()


def today() -> str:
    """Current date as YYYYMMDD, used for output directory names."""
    return datetime.now().strftime("%Y%m%d")


def utc_now() -> datetime:
    """Timezone-aware current UTC datetime, used for stored document timestamps."""
    return datetime.now(timezone.utc)
