"""
Timestamp normalization across storage tiers.

Records reach the pipeline with creation times in several shapes: ISO
strings from the document database, epoch numbers from local tiers,
``{"seconds", "nanoseconds"}`` maps from exported documents, or native
datetimes. Everything is reduced to a timezone-aware UTC datetime.
"""
from datetime import datetime, timezone
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Epoch numbers above this are milliseconds rather than seconds
_MILLISECOND_THRESHOLD = 10_000_000_000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_timestamp(value: Any) -> datetime:
    """Convert any supported timestamp representation to an aware UTC datetime.

    Unknown or unparseable values map to the Unix epoch so that they sort last
    in newest-first listings instead of raising.
    """
    if value is None or isinstance(value, bool):
        return EPOCH

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) >= _MILLISECOND_THRESHOLD else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return EPOCH

    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        if isinstance(seconds, (int, float)) and isinstance(nanos, (int, float)):
            return normalize_timestamp(float(seconds) + nanos / 1e9)
        return EPOCH

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return EPOCH
        # fromisoformat rejects a trailing Z before Python 3.11
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return normalize_timestamp(datetime.fromisoformat(text))
        except ValueError:
            pass
        try:
            return normalize_timestamp(float(text))
        except ValueError:
            return EPOCH

    return EPOCH


def to_iso(value: Any) -> str:
    """Normalize and render as an ISO-8601 string."""
    return normalize_timestamp(value).isoformat()
