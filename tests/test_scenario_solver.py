"""Tests for src.planning_engine.scenario_solver."""

from datetime import datetime, timedelta, timezone

import pytest

from src.planning_engine.models import (
    DesiredOutcome,
    RemainingSkirmish,
    ScenarioInput,
    VPAwards,
)
from src.planning_engine.scenario_solver import (
    calculate_final_vp,
    get_current_standings,
    satisfies_outcome,
    solve_scenario,
)

MATCH_START = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
RED_BLUE_GREEN = DesiredOutcome(first="red", second="blue", third="green")


# ── Helpers ──────────────────────────────────────────────────────────


def _make_skirmish(skirmish_id, first=5, second=4, third=3):
    start = MATCH_START + timedelta(hours=2 * (skirmish_id - 1))
    return RemainingSkirmish(
        id=skirmish_id,
        start_time=start,
        end_time=start + timedelta(hours=2),
        vp_awards=VPAwards(first=first, second=second, third=third),
    )


def _make_remaining(count, **awards):
    return [_make_skirmish(i + 1, **awards) for i in range(count)]


def _make_input(current_vp, remaining, outcome=RED_BLUE_GREEN, min_margin=1):
    return ScenarioInput(
        current_vp=current_vp,
        remaining_skirmishes=remaining,
        desired_outcome=outcome,
        min_margin=min_margin,
    )


def _recompute_final_vp(current_vp, remaining, result):
    awards = {s.id: s.vp_awards for s in remaining}
    vp = dict(current_vp)
    for entry in result.required_placements:
        for color, rank in entry.placements.items():
            vp[color] += awards[entry.skirmish_id].for_rank(rank)
    return vp


# ── Input validation ─────────────────────────────────────────────────


class TestInvalidOutcome:
    def test_duplicate_team_rejected(self, solver):
        outcome = DesiredOutcome(first="red", second="red", third="green")
        result = solver.solve_scenario(
            _make_input({"red": 1000, "blue": 950, "green": 900}, _make_remaining(3), outcome)
        )
        assert result.is_possible is False
        assert result.error == "invalid_outcome"
        assert "Invalid desired outcome" in result.reason
        assert result.required_placements is None

    def test_unknown_color_rejected(self, solver):
        outcome = DesiredOutcome(first="red", second="blue", third="purple")
        result = solver.solve_scenario(
            _make_input({"red": 1000, "blue": 950, "green": 900}, _make_remaining(3), outcome)
        )
        assert result.is_possible is False
        assert result.error == "invalid_outcome"


# ── Feasible scenarios ───────────────────────────────────────────────


class TestFeasibleScenarios:
    def test_already_leading_needs_no_wins(self, solver):
        current = {"red": 1000, "blue": 950, "green": 900}
        remaining = _make_remaining(10)
        result = solver.solve_scenario(_make_input(current, remaining))

        assert result.is_possible is True
        assert result.required_first_places == 0
        assert result.difficulty == "easy"
        assert result.error is None
        # Red takes second in every skirmish: 1000 + 10 * 4
        assert result.final_vp == {"red": 1040, "blue": 980, "green": 950}
        assert result.margin == 60

    def test_comeback_needs_minimal_wins(self, solver):
        current = {"red": 1000, "blue": 950, "green": 950}
        remaining = _make_remaining(10)
        result = solver.solve_scenario(_make_input(current, remaining))

        assert result.is_possible is True
        assert result.required_first_places == 7
        assert result.difficulty == "hard"
        assert result.final_vp == {"red": 1047, "blue": 987, "green": 986}

    def test_wins_go_to_highest_value_skirmishes(self, solver):
        current = {"red": 1000, "blue": 900, "green": 880}
        remaining = [
            _make_skirmish(1, 5, 4, 3),
            _make_skirmish(2, 43, 32, 21),
            _make_skirmish(3, 19, 16, 13),
        ]
        result = solver.solve_scenario(_make_input(current, remaining))

        assert result.is_possible is True
        assert result.required_first_places == 1
        assert [p.skirmish_id for p in result.required_placements] == [1, 2, 3]
        assert result.required_placements[1].placements == {"red": 1, "blue": 2, "green": 3}
        for index in (0, 2):
            assert result.required_placements[index].placements == {
                "red": 2, "blue": 3, "green": 1,
            }
        assert result.final_vp == {"red": 1063, "blue": 948, "green": 925}
        assert result.difficulty == "easy"

    def test_plan_is_full_ranking_per_skirmish(self, solver):
        current = {"red": 1000, "blue": 950, "green": 950}
        remaining = _make_remaining(10)
        result = solver.solve_scenario(_make_input(current, remaining))

        assert len(result.required_placements) == len(remaining)
        for entry in result.required_placements:
            assert sorted(entry.placements.values()) == [1, 2, 3]

    def test_final_vp_recomputes_exactly(self, solver):
        current = {"red": 700, "blue": 720, "green": 690}
        remaining = [
            _make_skirmish(i + 1, *awards)
            for i, awards in enumerate([(43, 32, 21), (31, 24, 17), (19, 16, 13)] * 4)
        ]
        outcome = DesiredOutcome(first="green", second="red", third="blue")
        result = solver.solve_scenario(_make_input(current, remaining, outcome))

        assert result.is_possible is True
        assert _recompute_final_vp(current, remaining, result) == result.final_vp
        assert result.margin == result.final_vp["green"] - result.final_vp["red"]
        assert satisfies_outcome(result.final_vp, outcome, 1)

    def test_other_outcome_order(self, solver):
        current = {"red": 1000, "blue": 950, "green": 900}
        outcome = DesiredOutcome(first="green", second="blue", third="red")
        remaining = _make_remaining(40, first=43, second=32, third=21)
        result = solver.solve_scenario(_make_input(current, remaining, outcome))

        assert result.is_possible is True
        fv = result.final_vp
        assert fv["green"] >= fv["blue"] + 1
        assert fv["blue"] >= fv["red"] + 1


# ── Infeasible scenarios ─────────────────────────────────────────────


class TestInfeasibleScenarios:
    def test_unreachable_lead(self, solver):
        current = {"red": 900, "blue": 1000, "green": 950}
        result = solver.solve_scenario(_make_input(current, _make_remaining(5)))

        assert result.is_possible is False
        assert result.error == "infeasible"
        assert "Even if red wins all remaining skirmishes" in result.reason
        assert result.required_placements is None
        assert result.final_vp is None

    def test_greedy_exhausted(self, solver):
        # Within the raw VP bounds, but red never gains on blue in the plan
        current = {"red": 992, "blue": 1000, "green": 900}
        result = solver.solve_scenario(_make_input(current, _make_remaining(5)))

        assert result.is_possible is False
        assert result.error == "infeasible"
        assert "Could not find a valid path" in result.reason
        assert "won by red" in result.reason


# ── No remaining skirmishes ──────────────────────────────────────────


class TestNoRemainingSkirmishes:
    def test_current_standings_satisfy(self, solver):
        current = {"red": 1000, "blue": 950, "green": 900}
        result = solver.solve_scenario(_make_input(current, []))

        assert result.is_possible is True
        assert result.required_placements == []
        assert result.final_vp == current
        assert result.margin == 50
        assert result.required_first_places == 0
        assert result.difficulty is None

    def test_current_standings_fail(self, solver):
        current = {"red": 1000, "blue": 1000, "green": 900}
        result = solver.solve_scenario(_make_input(current, []))

        assert result.is_possible is False
        assert "No remaining skirmishes" in result.reason


# ── Monotonicity ─────────────────────────────────────────────────────


class TestMarginMonotonicity:
    def test_stricter_margin_never_needs_less_effort(self, solver):
        current = {"red": 1000, "blue": 950, "green": 950}
        remaining = _make_remaining(10)

        previous_k = -1
        became_infeasible = False
        for margin in range(1, 80):
            result = solver.solve_scenario(_make_input(current, remaining, min_margin=margin))
            if not result.is_possible:
                became_infeasible = True
                continue
            assert not became_infeasible, f"margin {margin} feasible after infeasible"
            assert result.required_first_places >= previous_k
            previous_k = result.required_first_places

        assert became_infeasible


# ── Helpers ──────────────────────────────────────────────────────────


class TestHelpers:
    def test_calculate_final_vp(self):
        remaining = _make_remaining(2)
        plan = [{"red": 1, "blue": 2, "green": 3}, {"red": 3, "blue": 1, "green": 2}]
        vp = calculate_final_vp({"red": 0, "blue": 0, "green": 0}, remaining, plan)
        assert vp == {"red": 8, "blue": 9, "green": 7}

    def test_current_standings(self):
        assert get_current_standings({"red": 1000, "blue": 950, "green": 900}) == RED_BLUE_GREEN
        assert get_current_standings({"red": 800, "blue": 1000, "green": 900}) == DesiredOutcome(
            first="blue", second="green", third="red",
        )

    def test_current_standings_ties_use_color_order(self):
        standings = get_current_standings({"red": 1000, "blue": 1000, "green": 900})
        assert standings == RED_BLUE_GREEN
        standings = get_current_standings({"red": 900, "blue": 1000, "green": 1000})
        assert standings == DesiredOutcome(first="blue", second="green", third="red")

    def test_module_function(self):
        result = solve_scenario(
            {"red": 1000, "blue": 950, "green": 900}, _make_remaining(3), RED_BLUE_GREEN,
        )
        assert result.is_possible is True
        assert result.required_first_places == 0

    def test_default_margin_is_one(self):
        scenario = ScenarioInput(
            current_vp={"red": 1, "blue": 0, "green": 0},
            remaining_skirmishes=[],
            desired_outcome=RED_BLUE_GREEN,
        )
        assert scenario.min_margin == 1
