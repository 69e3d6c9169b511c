"""Spatial metrics over a grid snapshot: interface density and occupancy."""

from __future__ import annotations

import numpy as np

from schelling_explorer.config.constants import EMPTY_CELL, GROUP_ID_MASK, GROUP_ID_SHIFT
from schelling_explorer.domain.grid import BoundaryMode, neighborhood_size


def occupancy_count(cells: np.ndarray) -> int:
    """Number of non-empty cells in ``cells``."""
    return int(np.count_nonzero(cells != EMPTY_CELL))


def _shifted(array: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Toroidal view where ``result[x, y] == array[x + dx, y + dy]`` (wrapped)."""
    return np.roll(array, shift=(-dx, -dy), axis=(0, 1))


def interface_density(
    cells: np.ndarray,
    radius: int = 1,
    mode: BoundaryMode = BoundaryMode.TOROIDAL,
) -> float:
    """Fraction of possible neighbor pairs that join two different groups.

    Every occupied cell is paired with each occupied cell of its Moore
    neighborhood; a pair counts when the two group ids differ.  The count is
    normalized by ``occupied * ((2r + 1) ** 2 - 1)``, i.e. ``8 * occupied``
    at radius 1, so neighborhoods clipped at a bounded edge still weigh in
    with their full slot count.  Returns NaN when no cell is occupied.
    """
    if radius < 1:
        raise ValueError("radius must be >= 1")
    occupied = cells != EMPTY_CELL
    n_occupied = int(np.count_nonzero(occupied))
    if n_occupied == 0:
        return float("nan")

    group_ids = (cells.astype(np.int64) >> GROUP_ID_SHIFT) & GROUP_ID_MASK
    width, height = cells.shape
    different = 0
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if dx == 0 and dy == 0:
                continue
            if mode is BoundaryMode.TOROIDAL:
                center_occ = occupied
                center_ids = group_ids
                neighbor_occ = _shifted(occupied, dx, dy)
                neighbor_ids = _shifted(group_ids, dx, dy)
            else:
                x0, x1 = max(0, -dx), width - max(0, dx)
                y0, y1 = max(0, -dy), height - max(0, dy)
                if x1 <= x0 or y1 <= y0:
                    continue
                center_occ = occupied[x0:x1, y0:y1]
                center_ids = group_ids[x0:x1, y0:y1]
                neighbor_occ = occupied[x0 + dx : x1 + dx, y0 + dy : y1 + dy]
                neighbor_ids = group_ids[x0 + dx : x1 + dx, y0 + dy : y1 + dy]
            mixed = center_occ & neighbor_occ & (center_ids != neighbor_ids)
            different += int(np.count_nonzero(mixed))
    return different / (n_occupied * neighborhood_size(radius))
