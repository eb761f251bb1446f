"""Historical placement aggregation.

Turns a team's completed skirmishes into overall and time-window-bucketed
placement counts and probabilities. Empty buckets never produce a
degenerate distribution:

* no history at all -> the fixed default prior (0.33 / 0.34 / 0.33)
* an empty window while overall has data -> the overall triple, verbatim
"""

import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.match_data.config import TIME_WINDOWS
from src.match_data.time_windows import get_time_window, to_utc
from src.planning_engine.config import DEFAULT_PLACEMENT_PROBABILITY
from src.planning_engine.models import (
    AllianceComposition,
    AllianceStats,
    PlacementCounts,
    PlacementProbability,
    SkirmishResult,
    TeamHistoricalStats,
    WindowStats,
)

logger = logging.getLogger(__name__)

_RANKS = [1, 2, 3]
_FRAME_COLUMNS = [
    "skirmish_id", "timestamp", "window", "placement", "score", "vp", "alliance_key",
]


def create_alliance_key(world_ids: Iterable[int]) -> str:
    """Sorted, comma-separated world ids, e.g. ``"1001,1002,1003"``."""
    return ",".join(str(w) for w in sorted(world_ids))


class HistoricalAggregator:
    """Aggregate skirmish placements for one team into probability profiles.

    The aggregator is stateless: each call builds its own frame from the
    supplied results and nothing is cached between calls.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def aggregate_history(
        self,
        skirmish_results: List[SkirmishResult],
        team_color: str,
        team_name: str,
        region: str,
    ) -> TeamHistoricalStats:
        """Compute placement statistics for *team_color*.

        Args:
            skirmish_results: Completed skirmishes, in any order.
            team_color: ``"red"``, ``"blue"`` or ``"green"``.
            team_name: Display name carried onto the result.
            region: ``"na"`` or ``"eu"``; classifies each timestamp.

        Returns:
            :class:`TeamHistoricalStats` with overall and per-window counts,
            probabilities, and alliance breakdowns when results carry them.
        """
        frame = self.build_frame(skirmish_results, team_color, region)

        if frame.empty:
            logger.debug(
                "No history for %s (%s); using default prior", team_name, team_color
            )
            return TeamHistoricalStats(
                team_color=team_color,
                team_name=team_name,
                overall=WindowStats(),
                by_window={w: WindowStats() for w in TIME_WINDOWS},
                placement_probability=DEFAULT_PLACEMENT_PROBABILITY,
                placement_probability_by_window={
                    w: DEFAULT_PLACEMENT_PROBABILITY for w in TIME_WINDOWS
                },
            )

        overall, by_window, probability, probability_by_window = self._summarize(frame)

        by_alliance = self._aggregate_alliances(frame)
        current_alliance = self._current_alliance(frame, by_alliance)

        logger.info(
            "Aggregated %d skirmishes for %s (%s): 1st=%.2f 2nd=%.2f 3rd=%.2f",
            overall.total_skirmishes, team_name, team_color,
            probability.first, probability.second, probability.third,
        )

        return TeamHistoricalStats(
            team_color=team_color,
            team_name=team_name,
            overall=overall,
            by_window=by_window,
            placement_probability=probability,
            placement_probability_by_window=probability_by_window,
            by_alliance=by_alliance,
            current_alliance=current_alliance,
        )

    @staticmethod
    def build_frame(
        skirmish_results: List[SkirmishResult],
        team_color: str,
        region: str,
    ) -> pd.DataFrame:
        """One row per skirmish from *team_color*'s point of view."""
        rows = []
        for result in skirmish_results:
            alliance_key = None
            if result.alliances and result.alliances.get(team_color):
                alliance_key = create_alliance_key(result.alliances[team_color])
            rows.append({
                "skirmish_id": result.skirmish_id,
                "timestamp": to_utc(result.timestamp),
                "window": get_time_window(result.timestamp, region),
                "placement": int(result.placements[team_color]),
                "score": float(result.scores.get(team_color, 0)),
                "vp": float(result.vp_awarded.get(team_color, 0)),
                "alliance_key": alliance_key,
            })
        frame = pd.DataFrame(rows, columns=_FRAME_COLUMNS)
        # Fixed row order keeps float averages independent of input order.
        return frame.sort_values(
            ["timestamp", "skirmish_id"], kind="mergesort"
        ).reset_index(drop=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _summarize(self, frame: pd.DataFrame):
        """Overall and per-window stats for a non-empty frame.

        Returns:
            ``(overall, by_window, probability, probability_by_window)``
        """
        overall = self._window_stats(frame)
        probability = PlacementProbability.from_counts(overall.placements)

        # Window x placement counts; every window and rank present.
        counts = (
            pd.crosstab(frame["window"], frame["placement"])
            .reindex(index=list(TIME_WINDOWS), columns=_RANKS, fill_value=0)
        )
        means = frame.groupby("window")[["score", "vp"]].mean()

        by_window: Dict[str, WindowStats] = {}
        probability_by_window: Dict[str, PlacementProbability] = {}
        for window in TIME_WINDOWS:
            row = counts.loc[window]
            placements = PlacementCounts(
                first=int(row[1]), second=int(row[2]), third=int(row[3]),
            )
            if placements.total > 0:
                by_window[window] = WindowStats(
                    total_skirmishes=placements.total,
                    placements=placements,
                    average_score=float(means.loc[window, "score"]),
                    average_vp=float(means.loc[window, "vp"]),
                )
                probability_by_window[window] = PlacementProbability.from_counts(placements)
            else:
                by_window[window] = WindowStats()
                probability_by_window[window] = probability

        return overall, by_window, probability, probability_by_window

    @staticmethod
    def _window_stats(frame: pd.DataFrame) -> WindowStats:
        tally = frame["placement"].value_counts().reindex(_RANKS, fill_value=0)
        placements = PlacementCounts(
            first=int(tally[1]), second=int(tally[2]), third=int(tally[3]),
        )
        return WindowStats(
            total_skirmishes=len(frame),
            placements=placements,
            average_score=float(frame["score"].mean()),
            average_vp=float(frame["vp"].mean()),
        )

    def _aggregate_alliances(self, frame: pd.DataFrame) -> Dict[str, AllianceStats]:
        with_alliance = frame.dropna(subset=["alliance_key"])
        by_alliance: Dict[str, AllianceStats] = {}
        for key in sorted(with_alliance["alliance_key"].unique()):
            subset = with_alliance[with_alliance["alliance_key"] == key]
            overall, by_window, probability, probability_by_window = self._summarize(subset)
            by_alliance[key] = AllianceStats(
                alliance=AllianceComposition(
                    alliance_key=key,
                    world_ids=tuple(int(w) for w in key.split(",")),
                ),
                stats=overall,
                stats_by_window=by_window,
                placement_probability=probability,
                placement_probability_by_window=probability_by_window,
            )
        return by_alliance

    @staticmethod
    def _current_alliance(
        frame: pd.DataFrame,
        by_alliance: Dict[str, AllianceStats],
    ) -> Optional[AllianceComposition]:
        """Alliance of the latest skirmish (ties go to the higher id)."""
        with_alliance = frame.dropna(subset=["alliance_key"])
        if with_alliance.empty:
            return None
        latest = with_alliance.iloc[-1]
        return by_alliance[latest["alliance_key"]].alliance


def aggregate_history(
    skirmish_results: List[SkirmishResult],
    team_color: str,
    team_name: str,
    region: str,
) -> TeamHistoricalStats:
    """Module-level shortcut for :meth:`HistoricalAggregator.aggregate_history`."""
    return HistoricalAggregator().aggregate_history(
        skirmish_results, team_color, team_name, region,
    )
