"""Required-performance evaluation.

For each team in a desired ranking, compares the share of remaining
skirmishes it must win to close its VP gap against its historical odds of
finishing at the rank it is assigned, and labels the difficulty.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional

from src.planning_engine.config import DEFAULT_MIN_MARGIN, DEFAULT_PLACEMENT_PROBABILITY
from src.planning_engine.difficulty import difficulty_for_percentage
from src.planning_engine.models import (
    DesiredOutcome,
    PlacementProbability,
    RequiredPerformanceResult,
    TeamHistoricalStats,
    VPAwards,
)

logger = logging.getLogger(__name__)


class RequiredPerformanceEvaluator:
    """Blend required effort with historical team strength.

    Stateless: every input is passed to :meth:`evaluate_required_performance`.
    """

    def evaluate_required_performance(
        self,
        current_vp: Mapping[str, int],
        remaining_skirmishes: int,
        average_vp: VPAwards,
        desired_outcome: DesiredOutcome,
        historical_stats: Mapping[str, Optional[TeamHistoricalStats]],
        min_margin: int = DEFAULT_MIN_MARGIN,
    ) -> List[RequiredPerformanceResult]:
        """Assess every team of *desired_outcome*, in desired-rank order.

        Args:
            current_vp: VP per color.
            remaining_skirmishes: Number of skirmishes left to play.
            average_vp: Average VP per rank over the remaining schedule.
            desired_outcome: Target final ranking.
            historical_stats: Stats per color; missing or empty entries
                fall back to the default prior.
            min_margin: VP gap required between adjacent teams.

        Returns:
            One :class:`RequiredPerformanceResult` per team, or an empty
            list when *desired_outcome* is not a valid ranking.
        """
        is_valid, error_msg = desired_outcome.validate()
        if not is_valid:
            logger.warning(
                "Cannot evaluate invalid outcome %s: %s",
                desired_outcome.ordered(), error_msg,
            )
            return []

        ranking = desired_outcome.ordered()
        swing_per_skirmish = average_vp.first - average_vp.third

        results: List[RequiredPerformanceResult] = []
        for team in ranking:
            target_placement = desired_outcome.rank_of(team)
            team_vp = current_vp.get(team, 0)
            if target_placement == 1:
                # The leader has to clear whichever of the other two is ahead.
                rival = max(ranking[1:], key=lambda t: current_vp.get(t, 0))
                swing = current_vp.get(rival, 0) + min_margin - team_vp
            else:
                rival = ranking[target_placement - 2]
                swing = team_vp + min_margin - current_vp.get(rival, 0)
            swing = max(0, swing)

            required = self._required_placements(swing, swing_per_skirmish, remaining_skirmishes)
            required_rate = self._required_rate(required, swing, remaining_skirmishes)
            historical_rate = self._probability_for(
                team, historical_stats
            ).for_rank(target_placement)

            ratio = self._ratio(required_rate, historical_rate)
            difficulty = difficulty_for_percentage(100 * ratio)

            results.append(RequiredPerformanceResult(
                team=team,
                target_placement=target_placement,
                current_vp=team_vp,
                required_vp_swing=swing,
                required_placements=required,
                required_win_rate=required_rate,
                historical_win_rate=historical_rate,
                difficulty=difficulty,
                feasibility=self._describe(required_rate, historical_rate, target_placement),
            ))

            logger.debug(
                "%s -> #%d vs %s: swing=%d need=%d rate=%.2f hist=%.2f (%s)",
                team, target_placement, rival, swing, required,
                required_rate, historical_rate, difficulty,
            )

        return results

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _probability_for(
        team: str,
        historical_stats: Mapping[str, Optional[TeamHistoricalStats]],
    ) -> PlacementProbability:
        stats = historical_stats.get(team)
        if stats is None or stats.overall.total_skirmishes == 0:
            logger.warning("No history for %s; using default placement prior", team)
            return DEFAULT_PLACEMENT_PROBABILITY
        return stats.placement_probability

    @staticmethod
    def _required_placements(swing: int, swing_per_skirmish: float, remaining: int) -> int:
        """Skirmishes needed to move *swing* VP; capped at *remaining*."""
        if swing <= 0:
            return 0
        if swing_per_skirmish <= 0:
            return remaining
        return min(remaining, math.ceil(swing / swing_per_skirmish))

    @staticmethod
    def _required_rate(required: int, swing: int, remaining: int) -> float:
        if remaining <= 0:
            return 0.0 if swing <= 0 else 1.0
        return min(1.0, required / remaining)

    @staticmethod
    def _ratio(required_rate: float, historical_rate: float) -> float:
        if required_rate <= 0:
            return 0.0
        if historical_rate <= 0:
            return math.inf
        return required_rate / historical_rate

    @staticmethod
    def _describe(required_rate: float, historical_rate: float, rank: int) -> str:
        needed = f"{required_rate * 100:.1f}%"
        history = f"{historical_rate * 100:.1f}%"
        if required_rate <= historical_rate:
            return f"On track - historically finishes #{rank} {history} of the time"
        if required_rate <= historical_rate * 1.5:
            return f"Challenging - needs {needed} vs historical {history}"
        return f"Very difficult - needs {needed} vs historical {history}"


def average_vp_awards(awards: List[VPAwards]) -> VPAwards:
    """Mean award per rank over a schedule (zeros for an empty schedule)."""
    if not awards:
        return VPAwards(first=0, second=0, third=0)
    count = len(awards)
    return VPAwards(
        first=sum(a.first for a in awards) / count,
        second=sum(a.second for a in awards) / count,
        third=sum(a.third for a in awards) / count,
    )


def evaluate_required_performance(
    current_vp: Dict[str, int],
    remaining_skirmishes: int,
    average_vp: VPAwards,
    desired_outcome: DesiredOutcome,
    historical_stats: Mapping[str, Optional[TeamHistoricalStats]],
    min_margin: int = DEFAULT_MIN_MARGIN,
) -> List[RequiredPerformanceResult]:
    """Module-level shortcut for
    :meth:`RequiredPerformanceEvaluator.evaluate_required_performance`."""
    return RequiredPerformanceEvaluator().evaluate_required_performance(
        current_vp, remaining_skirmishes, average_vp, desired_outcome,
        historical_stats, min_margin,
    )
