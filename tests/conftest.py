"""Shared fixtures for the planner test suite."""

import pytest

from src.planning_engine.historical_aggregator import HistoricalAggregator
from src.planning_engine.performance_evaluator import RequiredPerformanceEvaluator
from src.planning_engine.scenario_solver import ScenarioSolver


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture(scope="module")
def aggregator():
    return HistoricalAggregator()


@pytest.fixture(scope="module")
def solver():
    return ScenarioSolver()


@pytest.fixture(scope="module")
def evaluator():
    return RequiredPerformanceEvaluator()
