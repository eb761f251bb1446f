"""Conversion of raw match-skirmish records into ranked SkirmishResults.

Placements are derived by ranking raw scores descending. Equal scores are
broken by the fixed color order red, blue, green so that every result is a
bijection from colors to ranks.
"""

import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from src.match_data.config import TEAM_COLORS
from src.match_data.time_windows import Timestamp
from src.match_data.vp_tiers import get_vp_tier_for_time, skirmish_start_time
from src.planning_engine.models import SkirmishResult, VPAwards

logger = logging.getLogger(__name__)


def rank_scores(scores: Mapping[str, float]) -> Dict[str, int]:
    """Rank teams by score, highest first.

    ``sorted`` is stable and the input is walked in TEAM_COLORS order, so
    tied scores keep red ahead of blue ahead of green.
    """
    ordered = sorted(TEAM_COLORS, key=lambda color: -scores.get(color, 0))
    return {color: rank for rank, color in enumerate(ordered, start=1)}


def _vp_awards_from(raw_tier: Optional[Mapping], timestamp: datetime, region: str) -> VPAwards:
    if raw_tier:
        return VPAwards(
            first=int(raw_tier["first"]),
            second=int(raw_tier["second"]),
            third=int(raw_tier["third"]),
        )
    tier = get_vp_tier_for_time(timestamp, region)
    return VPAwards(first=tier.first, second=tier.second, third=tier.third)


def convert_match_skirmishes_to_results(
    skirmishes: Sequence[Mapping],
    match_start: Timestamp,
    region: str,
    alliances: Optional[Mapping[str, Sequence[int]]] = None,
) -> List[SkirmishResult]:
    """Convert upstream skirmish records to :class:`SkirmishResult` values.

    Args:
        skirmishes: Records with ``id``, ``scores`` (per color) and an
            optional ``vp_tier`` (``{"first", "second", "third"}``).
        match_start: Match start instant; record *n* is stamped
            ``match_start + n * 2h``.
        region: ``"na"`` or ``"eu"``, used when a record has no ``vp_tier``.
        alliances: Optional world ids per color, copied onto every result.

    Returns:
        One result per record, in input order.
    """
    results: List[SkirmishResult] = []
    for index, skirmish in enumerate(skirmishes):
        timestamp = skirmish_start_time(match_start, index)
        scores = {color: skirmish["scores"][color] for color in TEAM_COLORS}
        placements = rank_scores(scores)
        awards = _vp_awards_from(skirmish.get("vp_tier"), timestamp, region)

        results.append(SkirmishResult(
            skirmish_id=int(skirmish["id"]),
            timestamp=timestamp,
            placements=placements,
            scores=scores,
            vp_awarded={
                color: awards.for_rank(rank) for color, rank in placements.items()
            },
            alliances=(
                {color: list(alliances.get(color, [])) for color in TEAM_COLORS}
                if alliances else None
            ),
        ))

    logger.debug("Converted %d skirmish records (%s)", len(results), region)
    return results
