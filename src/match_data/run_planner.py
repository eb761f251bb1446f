"""Build a VP outcome plan for a saved match snapshot.

Usage:
    python -m src.match_data.run_planner <match_file> <first> <second> <third> [min_margin]

Examples:
    python -m src.match_data.run_planner data/raw/match_1-2.json red blue green
    python -m src.match_data.run_planner data/raw/match_2-1.json green red blue 25
"""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from src.logging_config import setup_logging
from src.match_data.config import PROCESSED_DATA_DIR, TEAM_COLORS, TIME_WINDOWS
from src.match_data.conversion import convert_match_skirmishes_to_results
from src.match_data.ingestion import MatchSnapshotIngester
from src.planning_engine.config import DEFAULT_MIN_MARGIN
from src.planning_engine.historical_aggregator import HistoricalAggregator
from src.planning_engine.models import DesiredOutcome, ScenarioInput, TeamHistoricalStats
from src.planning_engine.performance_evaluator import (
    RequiredPerformanceEvaluator,
    average_vp_awards,
)
from src.planning_engine.scenario_solver import ScenarioSolver

logger = logging.getLogger(__name__)


def probability_table(stats: Dict[str, TeamHistoricalStats]) -> pd.DataFrame:
    """Per-team, per-window placement probabilities as a tidy frame.

    Columns: ``team``, ``window``, ``samples``, ``first``, ``second``, ``third``.
    The ``overall`` window row holds the team-wide triple.
    """
    rows = []
    for color, team_stats in stats.items():
        rows.append({
            "team": color,
            "window": "overall",
            "samples": team_stats.overall.total_skirmishes,
            **asdict(team_stats.placement_probability),
        })
        for window in TIME_WINDOWS:
            rows.append({
                "team": color,
                "window": window,
                "samples": team_stats.by_window[window].total_skirmishes,
                **asdict(team_stats.placement_probability_by_window[window]),
            })
    return pd.DataFrame(
        rows, columns=["team", "window", "samples", "first", "second", "third"]
    )


def run_planner(
    match_file: Path,
    desired_outcome: DesiredOutcome,
    min_margin: int = DEFAULT_MIN_MARGIN,
    output_dir: Optional[Path] = None,
    as_of: Optional[datetime] = None,
) -> Path:
    """Plan *desired_outcome* for the match saved in *match_file*.

    Args:
        match_file: Saved match snapshot JSON.
        desired_outcome: Target final ranking.
        min_margin: Minimum VP gap between adjacent teams.
        output_dir: Directory for the JSON report.
            Defaults to ``data/processed/``.
        as_of: Instant splitting played from remaining skirmishes.

    Returns:
        Path to the generated report.

    Raises:
        FileNotFoundError: If *match_file* doesn't exist.
    """
    if output_dir is None:
        output_dir = PROCESSED_DATA_DIR

    # 1. Ingest
    logger.info("Step 1/4: Reading match snapshot...")
    snapshot = MatchSnapshotIngester(Path(match_file).parent).read_file(
        match_file, as_of=as_of
    )

    # 2. Convert + aggregate
    logger.info("Step 2/4: Aggregating skirmish history...")
    results = convert_match_skirmishes_to_results(
        snapshot.completed_skirmishes,
        snapshot.start_time,
        snapshot.region,
        alliances=snapshot.alliances,
    )
    aggregator = HistoricalAggregator()
    stats = {
        color: aggregator.aggregate_history(
            results, color, snapshot.team_names[color], snapshot.region
        )
        for color in TEAM_COLORS
    }

    # 3. Solve
    logger.info("Step 3/4: Solving scenario %s...", " > ".join(desired_outcome.ordered()))
    scenario = ScenarioSolver().solve_scenario(ScenarioInput(
        current_vp=snapshot.victory_points,
        remaining_skirmishes=snapshot.remaining_skirmishes,
        desired_outcome=desired_outcome,
        min_margin=min_margin,
    ))

    # 4. Evaluate
    logger.info("Step 4/4: Evaluating required performance...")
    assessments = RequiredPerformanceEvaluator().evaluate_required_performance(
        snapshot.victory_points,
        len(snapshot.remaining_skirmishes),
        average_vp_awards([s.vp_awards for s in snapshot.remaining_skirmishes]),
        desired_outcome,
        stats,
        min_margin=min_margin,
    )

    report = {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "match_id": snapshot.match_id,
            "region": snapshot.region,
            "completed_skirmishes": len(results),
            "remaining_skirmishes": len(snapshot.remaining_skirmishes),
            "desired_outcome": asdict(desired_outcome),
            "min_margin": min_margin,
        },
        "current_vp": snapshot.victory_points,
        "scenario": asdict(scenario),
        "assessments": [asdict(a) for a in assessments],
        "probabilities": probability_table(stats).to_dict(orient="records"),
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"plan_{snapshot.match_id}.json"
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, default=str)

    if scenario.is_possible:
        logger.info(
            "Plan complete! %s needs %d first place(s) (%s). Output: %s",
            desired_outcome.first, scenario.required_first_places,
            scenario.difficulty, output_file,
        )
    else:
        logger.info("Outcome not reachable: %s. Output: %s", scenario.reason, output_file)

    return output_file


def main(argv: List[str]) -> int:
    """Command-line entry point; returns the process exit code."""
    if len(argv) < 4:
        print(__doc__)
        return 2

    try:
        match_file = Path(argv[0])
        outcome = DesiredOutcome(first=argv[1], second=argv[2], third=argv[3])
        margin = int(argv[4]) if len(argv) > 4 else DEFAULT_MIN_MARGIN
        output = run_planner(match_file, outcome, margin)
        print(f"Plan written: {output}")
    except Exception:
        logger.exception("Planner failed")
        return 1
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main(sys.argv[1:]))
