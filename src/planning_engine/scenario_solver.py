"""Minimum-effort scenario solver.

Finds a placement for every remaining skirmish such that the final VP
ranking matches a desired outcome with at least ``min_margin`` between
consecutive teams, while using as few first-place finishes for the
desired winner as the construction allows.

For an effort level ``k`` one concrete plan is built: the desired winner
takes the ``k`` skirmishes with the highest first-place award (ranking
first > second > third); every other skirmish is won by the desired-third
team with the desired winner second and the desired runner-up last. A
binary search over ``k`` in ``[0, N]`` returns the smallest ``k`` whose
plan satisfies the margins. This is a heuristic, not an exhaustive search,
and the effort counts it produces are what the difficulty bands assume.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from src.match_data.config import TEAM_COLORS
from src.planning_engine.config import DEFAULT_MIN_MARGIN, INFEASIBLE, INVALID_OUTCOME
from src.planning_engine.difficulty import difficulty_for_percentage
from src.planning_engine.models import (
    DesiredOutcome,
    RemainingSkirmish,
    ScenarioInput,
    ScenarioResult,
    SkirmishPlacement,
)

logger = logging.getLogger(__name__)

Placement = Dict[str, int]


class ScenarioSolver:
    """Search for the minimum-effort plan that reaches a desired ranking.

    The solver is stateless: all inputs arrive via :meth:`solve_scenario`.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def solve_scenario(self, scenario: ScenarioInput) -> ScenarioResult:
        """Find a plan that reaches ``scenario.desired_outcome``.

        Returns:
            A feasible :class:`ScenarioResult` with one full ranking per
            remaining skirmish (input order), or ``is_possible=False`` with
            a ``reason`` when the outcome is invalid or cannot be reached.
        """
        outcome = scenario.desired_outcome
        is_valid, error_msg = outcome.validate()
        if not is_valid:
            logger.warning("Invalid desired outcome %s: %s", outcome.ordered(), error_msg)
            return ScenarioResult(
                is_possible=False,
                reason=f"Invalid desired outcome: {error_msg}.",
                error=INVALID_OUTCOME,
            )

        current_vp = {color: scenario.current_vp.get(color, 0) for color in TEAM_COLORS}
        skirmishes = scenario.remaining_skirmishes
        min_margin = scenario.min_margin

        bound_violation = self._check_bounds(current_vp, skirmishes, outcome)
        if bound_violation:
            logger.info("Scenario %s infeasible: %s", outcome.ordered(), bound_violation)
            return ScenarioResult(is_possible=False, reason=bound_violation, error=INFEASIBLE)

        # Highest first-place award first; equal awards keep input order.
        by_value = sorted(
            range(len(skirmishes)),
            key=lambda i: skirmishes[i].vp_awards.first,
            reverse=True,
        )

        best: Optional[List[Placement]] = None
        best_k: Optional[int] = None
        low, high = 0, len(skirmishes)
        while low <= high:
            mid = (low + high) // 2
            plan = self._build_plan(skirmishes, by_value, outcome, mid)
            final_vp = calculate_final_vp(current_vp, skirmishes, plan)
            feasible = satisfies_outcome(final_vp, outcome, min_margin)
            logger.debug("Effort k=%d -> %s", mid, "feasible" if feasible else "short")
            if feasible:
                best, best_k = plan, mid
                high = mid - 1
            else:
                low = mid + 1

        if best is None:
            if skirmishes:
                reason = (
                    "Could not find a valid path even with all "
                    f"{len(skirmishes)} remaining skirmishes won by {outcome.first}"
                )
            else:
                reason = (
                    "No remaining skirmishes and the current standings do not "
                    f"satisfy {outcome.first} > {outcome.second} > {outcome.third} "
                    f"by {min_margin} VP"
                )
            logger.info("Scenario %s infeasible: %s", outcome.ordered(), reason)
            return ScenarioResult(is_possible=False, reason=reason, error=INFEASIBLE)

        final_vp = calculate_final_vp(current_vp, skirmishes, best)
        difficulty = None
        if skirmishes:
            difficulty = difficulty_for_percentage(100 * best_k / len(skirmishes))

        logger.info(
            "Scenario %s feasible with %d/%d first places for %s (%s)",
            outcome.ordered(), best_k, len(skirmishes), outcome.first, difficulty,
        )

        return ScenarioResult(
            is_possible=True,
            required_placements=[
                SkirmishPlacement(skirmish_id=s.id, placements=p)
                for s, p in zip(skirmishes, best)
            ],
            final_vp=final_vp,
            margin=final_vp[outcome.first] - final_vp[outcome.second],
            difficulty=difficulty,
            required_first_places=best_k,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_plan(
        skirmishes: Sequence[RemainingSkirmish],
        by_value: Sequence[int],
        outcome: DesiredOutcome,
        effort: int,
    ) -> List[Placement]:
        """Concrete plan for *effort* first places, in input order."""
        win = {outcome.first: 1, outcome.second: 2, outcome.third: 3}
        # Skirmishes outside the effort set go to the desired-third team.
        divert = {outcome.first: 2, outcome.second: 3, outcome.third: 1}

        plan: List[Placement] = [dict(divert) for _ in skirmishes]
        for index in by_value[:effort]:
            plan[index] = dict(win)
        return plan

    @staticmethod
    def _check_bounds(
        current_vp: Dict[str, int],
        skirmishes: Sequence[RemainingSkirmish],
        outcome: DesiredOutcome,
    ) -> Optional[str]:
        """Reason string when an adjacent pair can never be ordered, else None."""
        max_gain = sum(s.vp_awards.first for s in skirmishes)
        min_gain = sum(s.vp_awards.third for s in skirmishes)

        for upper, lower in ((outcome.first, outcome.second), (outcome.second, outcome.third)):
            upper_max = current_vp[upper] + max_gain
            lower_min = current_vp[lower] + min_gain
            if upper_max < lower_min:
                return (
                    f"Even if {upper} wins all remaining skirmishes "
                    f"(max {upper_max} VP), they cannot beat {lower}'s "
                    f"minimum {lower_min} VP."
                )
        return None


def calculate_final_vp(
    current_vp: Dict[str, int],
    skirmishes: Sequence[RemainingSkirmish],
    placements: Sequence[Placement],
) -> Dict[str, int]:
    """Sum each skirmish's rank awards onto *current_vp*."""
    final_vp = dict(current_vp)
    for skirmish, placement in zip(skirmishes, placements):
        for color, rank in placement.items():
            final_vp[color] += skirmish.vp_awards.for_rank(rank)
    return final_vp


def satisfies_outcome(
    vp: Dict[str, int],
    outcome: DesiredOutcome,
    min_margin: int,
) -> bool:
    return (
        vp[outcome.first] >= vp[outcome.second] + min_margin
        and vp[outcome.second] >= vp[outcome.third] + min_margin
    )


def get_current_standings(current_vp: Dict[str, int]) -> DesiredOutcome:
    """Current ranking by VP; ties keep red ahead of blue ahead of green."""
    ranked: Tuple[str, ...] = tuple(
        sorted(TEAM_COLORS, key=lambda color: -current_vp.get(color, 0))
    )
    return DesiredOutcome(first=ranked[0], second=ranked[1], third=ranked[2])


def solve_scenario(
    current_vp: Dict[str, int],
    remaining_skirmishes: List[RemainingSkirmish],
    desired_outcome: DesiredOutcome,
    min_margin: int = DEFAULT_MIN_MARGIN,
) -> ScenarioResult:
    """Module-level shortcut for :meth:`ScenarioSolver.solve_scenario`."""
    return ScenarioSolver().solve_scenario(ScenarioInput(
        current_vp=current_vp,
        remaining_skirmishes=remaining_skirmishes,
        desired_outcome=desired_outcome,
        min_margin=min_margin,
    ))
