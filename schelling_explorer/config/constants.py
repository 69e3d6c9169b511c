"""Centralized defaults and domain constants for the segregation engine.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

EMPTY_CELL = -1
"""Grid value marking an unoccupied cell."""

GROUP_ID_SHIFT = 16
"""Bit offset of the group identifier inside a packed cell value."""

GROUP_ID_MASK = 0xFF
"""Mask applied after shifting to recover the group identifier."""

UNHAPPY_BIT = -(1 << 31)
"""Sign bit of a signed 32-bit cell value; set when the occupant is unhappy."""

MAX_GROUP_ID = GROUP_ID_MASK - 1
"""Largest usable group identifier (0xFF is what an empty cell decodes to)."""

GRID_WIDTH = 100
"""Default grid width in cells."""

GRID_HEIGHT = 100
"""Default grid height in cells."""

PERCENT_EMPTY = 0.02
"""Default fraction of cells left empty when the dynamics allow it."""

SEARCH_RADIUS = 1
"""Default Moore-neighborhood radius."""

SEARCH_LIMIT = 30
"""Default number of empty cells sampled per relocation."""

MOVE_CHANCE = 0.02
"""Default probability that a happy agent queues for relocation anyway."""

MAXIMUM_STEPS = 30_000
"""Default tick budget for one run."""

SHUFFLE_TIMES = 4
"""Default number of passes of the 2D grid shuffle."""

STOP_ON_EQUILIBRIUM = False
"""Whether a run halts as soon as no agent is unhappy."""

FLUSH_THRESHOLD = 8_192
"""Flush metric rows to Parquet once this in-memory row count is reached."""

EMPTY_COLOR = "#ffffff"
"""Display color of an empty cell."""

DEFAULT_GROUP_COLORS: tuple[tuple[str, str], ...] = (
    ("#0033cc", "#99ccff"),
    ("#ff3300", "#ff9db3"),
)
"""(happy, unhappy) display colors for the two default groups."""

DEFAULT_HAPPY_COLOR = "#000000"
"""Happy color assigned to a group that was not given one."""

DEFAULT_UNHAPPY_COLOR = "#808080"
"""Unhappy color assigned to a group that was not given one."""
