"""Time-window classification for skirmish timestamps.

Every instant falls into exactly one of four daily activity windows
(``naPrime``, ``euPrime``, ``ocx``, ``offHours``) based purely on its UTC
hour. The windows are the partition key for all windowed aggregation.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Union

from src.match_data.config import (
    OFF_HOURS_WINDOW,
    PRIME_TIME_WINDOWS,
    REGIONS,
    TIME_WINDOWS,
    WINDOW_CHECK_ORDER,
)

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, str]


def to_utc(timestamp: Timestamp) -> datetime:
    """Normalize *timestamp* to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC. ISO-8601 strings are
    accepted, including a trailing ``Z``.
    """
    if isinstance(timestamp, str):
        text = timestamp.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        timestamp = datetime.fromisoformat(text)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def get_time_window(timestamp: Timestamp, region: str) -> str:
    """Return the time window containing *timestamp*.

    Args:
        timestamp: Instant to classify (datetime or ISO string).
        region: ``"na"`` or ``"eu"``.

    Returns:
        One of ``naPrime``, ``euPrime``, ``ocx``, ``offHours``.

    Raises:
        ValueError: If *region* is not a known region tag.
    """
    if region not in REGIONS:
        raise ValueError(f"Invalid region: {region!r}. Must be 'na' or 'eu'.")

    hour = to_utc(timestamp).hour
    for window in WINDOW_CHECK_ORDER[region]:
        bounds = PRIME_TIME_WINDOWS[window]
        if bounds["utc_hour_start"] <= hour < bounds["utc_hour_end"]:
            return window
    return "offHours"


def get_time_window_info(window: str) -> Dict:
    """Metadata (name, description, hour bounds) for a window id."""
    if window == "offHours":
        return {"id": window, **OFF_HOURS_WINDOW}
    if window not in PRIME_TIME_WINDOWS:
        raise ValueError(f"Unknown window id: {window!r}")
    return {"id": window, **PRIME_TIME_WINDOWS[window]}


def get_all_time_windows() -> List[Dict]:
    return [get_time_window_info(window) for window in TIME_WINDOWS]


def group_by_time_window(items: Iterable, region: str) -> Dict[str, List]:
    """Bucket items exposing a ``timestamp`` attribute or key by window."""
    grouped: Dict[str, List] = {window: [] for window in TIME_WINDOWS}
    for item in items:
        if isinstance(item, dict):
            ts = item["timestamp"]
        else:
            ts = item.timestamp
        grouped[get_time_window(ts, region)].append(item)
    return grouped


def calculate_window_coverage(items: Iterable, region: str) -> Dict[str, float]:
    """Percentage (0-100) of *items* falling in each window."""
    grouped = group_by_time_window(items, region)
    total = sum(len(bucket) for bucket in grouped.values())
    if total == 0:
        return {window: 0.0 for window in TIME_WINDOWS}
    return {
        window: len(bucket) / total * 100 for window, bucket in grouped.items()
    }
