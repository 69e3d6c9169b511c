"""Configuration layer: defaults and typed run configuration.

Only the constants are re-exported here; the typed configuration lives in
``schelling_explorer.config.types``, which depends on the domain and
simulation variant enums and is imported explicitly by callers.
"""

from schelling_explorer.config.constants import (
    EMPTY_CELL,
    FLUSH_THRESHOLD,
    GRID_HEIGHT,
    GRID_WIDTH,
    MAXIMUM_STEPS,
    MOVE_CHANCE,
    PERCENT_EMPTY,
    SEARCH_LIMIT,
    SEARCH_RADIUS,
    SHUFFLE_TIMES,
    STOP_ON_EQUILIBRIUM,
)

__all__ = [
    "EMPTY_CELL",
    "FLUSH_THRESHOLD",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "MAXIMUM_STEPS",
    "MOVE_CHANCE",
    "PERCENT_EMPTY",
    "SEARCH_LIMIT",
    "SEARCH_RADIUS",
    "SHUFFLE_TIMES",
    "STOP_ON_EQUILIBRIUM",
]
