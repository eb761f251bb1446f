"""Data models for the planning engine."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from src.match_data.config import TEAM_COLORS


@dataclass(frozen=True)
class SkirmishResult:
    """One completed skirmish, ranked from the perspective of all teams."""

    skirmish_id: int
    timestamp: datetime
    placements: Dict[str, int]  # color -> rank in {1, 2, 3}
    scores: Dict[str, float]
    vp_awarded: Dict[str, int]
    alliances: Optional[Dict[str, List[int]]] = None  # color -> world ids


@dataclass(frozen=True)
class PlacementCounts:
    first: int = 0
    second: int = 0
    third: int = 0

    @property
    def total(self) -> int:
        return self.first + self.second + self.third


@dataclass(frozen=True)
class PlacementProbability:
    """Probability of finishing 1st/2nd/3rd; the three values sum to 1."""

    first: float
    second: float
    third: float

    def for_rank(self, rank: int) -> float:
        """Probability of finishing at *rank* (1, 2 or 3)."""
        return (self.first, self.second, self.third)[rank - 1]

    @classmethod
    def from_counts(cls, counts: PlacementCounts) -> "PlacementProbability":
        total = counts.total
        return cls(
            first=counts.first / total,
            second=counts.second / total,
            third=counts.third / total,
        )


@dataclass(frozen=True)
class WindowStats:
    """Placement counts and averages for one bucket of skirmishes."""

    total_skirmishes: int = 0
    placements: PlacementCounts = field(default_factory=PlacementCounts)
    average_score: float = 0.0
    average_vp: float = 0.0


@dataclass(frozen=True)
class AllianceComposition:
    alliance_key: str  # sorted world ids joined by commas
    world_ids: Tuple[int, ...]


@dataclass
class AllianceStats:
    """Placement statistics for one alliance composition of a team."""

    alliance: AllianceComposition
    stats: WindowStats
    stats_by_window: Dict[str, WindowStats]
    placement_probability: PlacementProbability
    placement_probability_by_window: Dict[str, PlacementProbability]


@dataclass
class TeamHistoricalStats:
    """Overall and per-window placement history for a single team."""

    team_color: str
    team_name: str
    overall: WindowStats
    by_window: Dict[str, WindowStats]
    placement_probability: PlacementProbability
    placement_probability_by_window: Dict[str, PlacementProbability]
    by_alliance: Dict[str, AllianceStats] = field(default_factory=dict)
    current_alliance: Optional[AllianceComposition] = None


# ----------------------------------------------------------------------
# Scenario solving
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class VPAwards:
    """VP granted for each rank in one skirmish (or averaged over several)."""

    first: float
    second: float
    third: float

    def for_rank(self, rank: int) -> float:
        return (self.first, self.second, self.third)[rank - 1]


@dataclass(frozen=True)
class RemainingSkirmish:
    """A not-yet-played skirmish and what it is worth."""

    id: int
    start_time: datetime
    end_time: datetime
    vp_awards: VPAwards


@dataclass(frozen=True)
class DesiredOutcome:
    """A target final ranking: which color finishes 1st, 2nd and 3rd."""

    first: str
    second: str
    third: str

    def ordered(self) -> Tuple[str, str, str]:
        return (self.first, self.second, self.third)

    def rank_of(self, team: str) -> int:
        return self.ordered().index(team) + 1

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Check the ranking is a bijection over the three team colors.

        Returns:
            (is_valid, error_message) - (True, None) if valid
        """
        teams = self.ordered()
        unknown = [t for t in teams if t not in TEAM_COLORS]
        if unknown:
            return False, f"unknown team color(s): {', '.join(map(str, unknown))}"
        if len(set(teams)) != len(teams):
            return False, "teams cannot have the same placement"
        return True, None


@dataclass
class ScenarioInput:
    current_vp: Dict[str, int]
    remaining_skirmishes: List[RemainingSkirmish]
    desired_outcome: DesiredOutcome
    min_margin: int = 1


@dataclass(frozen=True)
class SkirmishPlacement:
    """Required full ranking for one remaining skirmish."""

    skirmish_id: int
    placements: Dict[str, int]


@dataclass
class ScenarioResult:
    """Outcome of a scenario search.

    When ``is_possible`` is False, ``reason`` explains why and ``error``
    is ``"invalid_outcome"`` or ``"infeasible"``.
    """

    is_possible: bool
    required_placements: Optional[List[SkirmishPlacement]] = None
    final_vp: Optional[Dict[str, int]] = None
    margin: Optional[int] = None
    difficulty: Optional[str] = None
    required_first_places: Optional[int] = None
    reason: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RequiredPerformanceResult:
    """Required-vs-historical assessment for one team."""

    team: str
    target_placement: int
    current_vp: int
    required_vp_swing: int
    required_placements: int
    required_win_rate: float
    historical_win_rate: float
    difficulty: str  # "easy", "moderate", "hard", "very-hard"
    feasibility: str
