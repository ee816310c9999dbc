"""Choosing how many singular triplets to keep.

Two percentage policies exist and they are deliberately kept apart:

* `select_rank_by_percentage` is exact: it walks a known spectrum until the
  cumulative energy (sum of sigma^2) reaches the requested share.
* `estimate_rank_from_percentage` is a cheap heuristic,
  floor(sqrt(p / 100) * min(width, height)), used when no spectrum has been
  computed yet.

The two can disagree for the same image and percentage.
"""

import math
from enum import Enum

import numpy as np


class RankMode(str, Enum):
    COUNT = "count"
    PERCENTAGE = "percentage"


def _check_percentage(percentage):
    if not 0 < percentage <= 100:
        raise ValueError(f"Percentage must be in (0, 100], got {percentage}")


def select_rank_by_percentage(singular_values, percentage) -> int:
    """
    Smallest k whose leading singular values retain `percentage` of the energy.

    Args:
        singular_values: descending sequence of singular values
        percentage: float in (0, 100]

    Returns:
        k: int >= 1 (1 for an empty spectrum)

    Raises:
        ValueError: If percentage is outside (0, 100]
    """
    _check_percentage(percentage)

    S = np.asarray(singular_values, dtype=float).reshape(-1)
    if S.size == 0:
        return 1

    cumulative = np.cumsum(S * S)
    target = cumulative[-1] * (percentage / 100)

    # first 1-based index where the running energy reaches the target
    k = int(np.searchsorted(cumulative, target, side="left")) + 1
    return max(1, min(k, S.size))


def estimate_rank_from_percentage(percentage, width: int, height: int) -> int:
    """
    Heuristic rank for a percentage when the spectrum is unknown.

    Leading singular values of natural images carry most of the energy, so
    the square root of the requested share is scaled by min(width, height).
    """
    _check_percentage(percentage)

    max_rank = min(width, height)
    k = max(1, math.floor(math.sqrt(percentage / 100) * max_rank))
    return min(k, max_rank)


def resolve_rank(value, mode, width: int, height: int, singular_values=None) -> int:
    """
    Turn a user-facing value into an effective rank.

    Count mode passes `value` through (the engine clips it to the matrix
    size). Percentage mode uses the exact cumulative-energy policy when
    `singular_values` is given and the heuristic estimate otherwise.
    """
    mode = RankMode(mode)

    if mode is RankMode.COUNT:
        return int(value)

    if singular_values is not None:
        return select_rank_by_percentage(singular_values, value)
    return estimate_rank_from_percentage(value, width, height)
