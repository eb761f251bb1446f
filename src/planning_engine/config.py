from src.planning_engine.models import PlacementProbability

# Prior used when a team has no history at all (fixed rounding, sums to 1)
DEFAULT_PLACEMENT_PROBABILITY = PlacementProbability(first=0.33, second=0.34, third=0.33)

DEFAULT_MIN_MARGIN = 1

# Upper bounds (inclusive, in percent) for each difficulty label
DIFFICULTY_BANDS = (
    (40.0, "easy"),
    (60.0, "moderate"),
    (80.0, "hard"),
)
HARDEST_DIFFICULTY = "very-hard"

# Result error kinds
INVALID_OUTCOME = "invalid_outcome"
INFEASIBLE = "infeasible"
