"""Version stamps derived from resource payloads."""
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

# Returns the current time in epoch milliseconds
Clock = Callable[[], int]

NO_VERSION = "0"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_timestamp_ms(value: Any) -> int | None:
    """
    Convert a payload timestamp to epoch milliseconds.

    Accepts ISO-8601 strings (naive values are treated as UTC, as the API emits
    them for SQLite-backed deployments), datetimes and numeric epoch milliseconds.
    Returns None for missing or unparseable values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        if value.isdigit():
            return int(value)
        try:
            dt = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def derive_version(payload: dict[str, Any] | None) -> str:
    """Version stamp of a single-record payload: its updated_at, or "0"."""
    if not payload:
        return NO_VERSION
    ts = parse_timestamp_ms(payload.get("updated_at"))
    return str(ts) if ts else NO_VERSION


def derive_list_version(items: Iterable[dict[str, Any]]) -> str:
    """Version stamp of a list payload: the most recent updated_at, or "0"."""
    latest = 0
    for item in items:
        if not isinstance(item, dict):
            continue
        ts = parse_timestamp_ms(item.get("updated_at"))
        if ts and ts > latest:
            latest = ts
    return str(latest) if latest else NO_VERSION
