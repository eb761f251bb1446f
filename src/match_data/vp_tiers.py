"""Victory Point award schedule by region and time of day."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from src.match_data.config import (
    NA_REGION_CODE,
    REGIONS,
    SKIRMISH_DURATION_HOURS,
    VP_SCHEDULES,
)
from src.match_data.time_windows import Timestamp, to_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VPTier:
    """VP granted for 1st/2nd/3rd in one skirmish, plus the tier label."""

    first: int
    second: int
    third: int
    tier: str  # "low", "medium", "high", "peak"


def get_vp_tier_for_time(skirmish_start: Timestamp, region: str) -> VPTier:
    """Look up the VP table for a skirmish starting at *skirmish_start*.

    Raises:
        ValueError: If *region* is not ``"na"`` or ``"eu"``.
    """
    if region not in REGIONS:
        raise ValueError(f"Invalid region: {region!r}. Must be 'na' or 'eu'.")

    hour = to_utc(skirmish_start).hour
    for start, end, (first, second, third), tier in VP_SCHEDULES[region]:
        if start <= hour < end:
            return VPTier(first=first, second=second, third=third, tier=tier)

    # Schedules cover all 24 hours; keep the lowest tier as a last resort.
    logger.warning("No VP tier found for hour %d in %s", hour, region)
    _, _, (first, second, third), tier = min(
        VP_SCHEDULES[region], key=lambda slot: slot[2][0]
    )
    return VPTier(first=first, second=second, third=third, tier=tier)


def get_vp_tier_for_skirmish(
    skirmish_number: int,
    match_start: Timestamp,
    region: str,
) -> VPTier:
    """VP table for the 1-based *skirmish_number* of a match."""
    start = to_utc(match_start) + timedelta(
        hours=(skirmish_number - 1) * SKIRMISH_DURATION_HOURS
    )
    return get_vp_tier_for_time(start, region)


def get_region_from_match_id(match_id: str) -> str:
    """Region tag from an upstream match id such as ``"1-5"`` or ``"2-3"``."""
    region_code = str(match_id).split("-")[0]
    return "na" if region_code == NA_REGION_CODE else "eu"


def skirmish_start_time(match_start: datetime, index: int) -> datetime:
    """Start instant of the 0-based *index*-th skirmish of a match."""
    return to_utc(match_start) + timedelta(hours=index * SKIRMISH_DURATION_HOURS)
