"""Ingestion of saved upstream match snapshots.

A snapshot is the JSON body the game API returns for one match, saved to
``match_<id>.json``. Only the fields the planner needs are read:

- ``id``, ``start_time``, ``end_time``
- ``victory_points`` per color
- ``skirmishes``: ``id``, ``scores`` per color, optional ``vp_tier``
- optional ``team_names`` and ``alliances`` (world ids per color)
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from src.match_data.config import (
    MATCH_FILE_PATTERN,
    SKIRMISH_DURATION_HOURS,
    TEAM_COLORS,
    TOTAL_SKIRMISHES_PER_MATCH,
)
from src.match_data.time_windows import to_utc
from src.match_data.vp_tiers import (
    get_region_from_match_id,
    get_vp_tier_for_time,
    skirmish_start_time,
)
from src.planning_engine.models import RemainingSkirmish, VPAwards

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = {"id", "start_time", "victory_points", "skirmishes"}


class IngestionError(Exception):
    """Raised when a match snapshot cannot be parsed."""


@dataclass
class MatchSnapshot:
    """Parsed match snapshot, split into played and remaining skirmishes."""

    match_id: str
    region: str
    start_time: datetime
    end_time: Optional[datetime]
    victory_points: Dict[str, int]
    completed_skirmishes: List[Dict]
    remaining_skirmishes: List[RemainingSkirmish]
    team_names: Dict[str, str] = field(default_factory=dict)
    alliances: Optional[Dict[str, List[int]]] = None


class MatchSnapshotIngester:
    """Reads match snapshot files from a directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, match_id: str) -> Path:
        filepath = self.data_dir / MATCH_FILE_PATTERN.format(match_id=match_id)
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def read_match(self, match_id: str, as_of: Optional[datetime] = None) -> MatchSnapshot:
        """Load and parse ``match_<match_id>.json``.

        Raises:
            FileNotFoundError: If the snapshot file is missing.
            IngestionError: If the file is not valid JSON or lacks keys.
        """
        return self.read_file(self._resolve_path(match_id), as_of=as_of)

    def read_file(self, filepath: Path, as_of: Optional[datetime] = None) -> MatchSnapshot:
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")

        logger.info("Reading match snapshot: %s", filepath.name)
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise IngestionError(f"Corrupt match snapshot {filepath}: {e}") from e

        return parse_snapshot(raw, as_of=as_of)


def parse_snapshot(raw: Dict, as_of: Optional[datetime] = None) -> MatchSnapshot:
    """Build a :class:`MatchSnapshot` from a decoded snapshot dict.

    A skirmish counts as completed when it ended at or before *as_of*
    (defaults to now). The in-progress skirmish and every later one up to
    the end of the match make up the remaining schedule.
    """
    if not isinstance(raw, dict):
        raise IngestionError("Match snapshot must be a JSON object")
    missing = _REQUIRED_KEYS - raw.keys()
    if missing:
        raise IngestionError(f"Match snapshot missing required keys: {sorted(missing)}")

    try:
        match_id = str(raw["id"])
        start_time = to_utc(raw["start_time"])
        end_time = to_utc(raw["end_time"]) if raw.get("end_time") else None
        victory_points = {
            color: int(raw["victory_points"][color]) for color in TEAM_COLORS
        }
    except (KeyError, TypeError, ValueError) as e:
        raise IngestionError(f"Malformed match snapshot: {e}") from e

    region = get_region_from_match_id(match_id)
    as_of = to_utc(as_of) if as_of else datetime.now(timezone.utc)
    duration = timedelta(hours=SKIRMISH_DURATION_HOURS)

    completed: List[Dict] = []
    for index, skirmish in enumerate(raw["skirmishes"]):
        if skirmish_start_time(start_time, index) + duration > as_of:
            break
        if "scores" not in skirmish or "id" not in skirmish:
            raise IngestionError(f"Skirmish record #{index} lacks id/scores")
        completed.append(skirmish)

    remaining: List[RemainingSkirmish] = []
    for index in range(len(completed), TOTAL_SKIRMISHES_PER_MATCH):
        begins = skirmish_start_time(start_time, index)
        if end_time is not None and begins >= end_time:
            break
        tier = get_vp_tier_for_time(begins, region)
        remaining.append(RemainingSkirmish(
            id=index + 1,
            start_time=begins,
            end_time=begins + duration,
            vp_awards=VPAwards(first=tier.first, second=tier.second, third=tier.third),
        ))

    logger.info(
        "Match %s (%s): %d completed, %d remaining skirmishes",
        match_id, region, len(completed), len(remaining),
    )

    return MatchSnapshot(
        match_id=match_id,
        region=region,
        start_time=start_time,
        end_time=end_time,
        victory_points=victory_points,
        completed_skirmishes=completed,
        remaining_skirmishes=remaining,
        team_names={
            color: raw.get("team_names", {}).get(color, color.title())
            for color in TEAM_COLORS
        },
        alliances=raw.get("alliances"),
    )
