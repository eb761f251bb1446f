"""Shared difficulty labelling for solver effort and evaluator ratios."""

import math

from src.planning_engine.config import DIFFICULTY_BANDS, HARDEST_DIFFICULTY


def difficulty_for_percentage(percentage: float) -> str:
    """Map a 0-100+ percentage onto ``easy``/``moderate``/``hard``/``very-hard``.

    ``<= 40`` is easy, ``<= 60`` moderate, ``<= 80`` hard, anything above
    (including infinity) very-hard.
    """
    if math.isnan(percentage):
        return HARDEST_DIFFICULTY
    for upper_bound, label in DIFFICULTY_BANDS:
        if percentage <= upper_bound:
            return label
    return HARDEST_DIFFICULTY
