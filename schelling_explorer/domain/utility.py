"""Neighborhood satisfaction scoring.

Evaluators return the same-group fraction of a Moore neighborhood and do no
thresholding; callers compare the result against a group tolerance with
``meets_tolerance``.
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from schelling_explorer.config.constants import EMPTY_CELL, GROUP_ID_MASK, GROUP_ID_SHIFT
from schelling_explorer.domain.grid import BoundaryMode, Grid, NeighborhoodBuffer
from schelling_explorer.domain.group import Group


def compare_evaluations(a: float, b: float) -> int:
    """Three-way comparison with NaN ordered above every number.

    Two NaNs compare equal.  This is the total order used wherever an
    evaluation is tested against a tolerance or another evaluation.
    """
    a_nan = math.isnan(a)
    b_nan = math.isnan(b)
    if a_nan or b_nan:
        return int(a_nan) - int(b_nan)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def meets_tolerance(evaluation: float, tolerance: float) -> bool:
    return compare_evaluations(evaluation, tolerance) >= 0


def _count_neighbors(
    grid: Grid,
    group: Group,
    x: int,
    y: int,
    radius: int,
    mode: BoundaryMode,
    buffer: NeighborhoodBuffer | None,
) -> tuple[int, int, int]:
    """Return ``(same_group, occupied, slots)`` for the neighborhood of ``(x, y)``."""
    neighborhood = grid.moore_neighbors(x, y, radius, mode, out=buffer)
    values = grid.values_at(neighborhood)
    occupied = values != EMPTY_CELL
    same = occupied & (((values >> GROUP_ID_SHIFT) & GROUP_ID_MASK) == group.group_id)
    return int(np.count_nonzero(same)), int(np.count_nonzero(occupied)), len(values)


def _ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


class UtilityEvaluator(Enum):
    """Neighborhood satisfaction variants."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    def evaluate(
        self,
        grid: Grid,
        group: Group,
        x: int,
        y: int,
        radius: int,
        mode: BoundaryMode,
        buffer: NeighborhoodBuffer | None = None,
    ) -> float:
        """Score a member of ``group`` standing at ``(x, y)``.

        ABSOLUTE divides same-group neighbors by every neighborhood slot, so
        empty cells dilute the score.  RELATIVE divides by occupied neighbors
        only and yields NaN when every neighbor is empty.
        """
        same, occupied, slots = _count_neighbors(grid, group, x, y, radius, mode, buffer)
        if self is UtilityEvaluator.ABSOLUTE:
            return _ratio(same, slots)
        return _ratio(same, occupied)
