# PATH: core/time.py
"""
Time utilities for VALMON.

All datetimes handled by the pipeline are timezone-aware UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _from_epoch(seconds: float) -> Optional[datetime]:
    if seconds < 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an explorer/RPC timestamp.

    Accepts ISO-8601 strings (with or without a trailing "Z"), unix seconds
    as int/float/decimal string, and "0x"-prefixed hex seconds. Epoch
    values outside the platform's datetime range (e.g. milliseconds) are
    unparseable.

    Returns:
        UTC datetime, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _from_epoch(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if text.lower().startswith("0x"):
        try:
            return _from_epoch(int(text, 16))
        except ValueError:
            return None

    if text.isdigit():
        return _from_epoch(int(text))

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def minutes_since(then: datetime, now: datetime) -> float:
    """Minutes elapsed between then and now (negative if then is later)."""
    return (ensure_utc(now) - ensure_utc(then)).total_seconds() / 60


def is_within_hours(ts: datetime, now: datetime, hours: int = 24) -> bool:
    """True if ts falls within (now - hours, now]."""
    ts = ensure_utc(ts)
    now = ensure_utc(now)
    return now - timedelta(hours=hours) < ts <= now
