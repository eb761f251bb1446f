from src.planning_engine.historical_aggregator import HistoricalAggregator, aggregate_history
from src.planning_engine.models import (
    DesiredOutcome,
    PlacementCounts,
    PlacementProbability,
    RemainingSkirmish,
    RequiredPerformanceResult,
    ScenarioInput,
    ScenarioResult,
    SkirmishPlacement,
    SkirmishResult,
    TeamHistoricalStats,
    VPAwards,
    WindowStats,
)
from src.planning_engine.performance_evaluator import (
    RequiredPerformanceEvaluator,
    evaluate_required_performance,
)
from src.planning_engine.scenario_solver import (
    ScenarioSolver,
    get_current_standings,
    solve_scenario,
)

__all__ = [
    "DesiredOutcome",
    "HistoricalAggregator",
    "PlacementCounts",
    "PlacementProbability",
    "RemainingSkirmish",
    "RequiredPerformanceEvaluator",
    "RequiredPerformanceResult",
    "ScenarioInput",
    "ScenarioResult",
    "ScenarioSolver",
    "SkirmishPlacement",
    "SkirmishResult",
    "TeamHistoricalStats",
    "VPAwards",
    "WindowStats",
    "aggregate_history",
    "evaluate_required_performance",
    "get_current_standings",
    "solve_scenario",
]
