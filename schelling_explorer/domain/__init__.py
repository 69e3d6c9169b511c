"""Domain layer: grid, groups, agents, apportionment, and utility scoring."""

from schelling_explorer.domain.agent import Agent
from schelling_explorer.domain.colors import StateColorMap
from schelling_explorer.domain.grid import (
    BoundaryMode,
    Coordinate,
    Grid,
    NeighborhoodBuffer,
    neighborhood_size,
)
from schelling_explorer.domain.group import (
    Group,
    HappinessState,
    group_id_of,
    is_unhappy_value,
)
from schelling_explorer.domain.population import PopulationDispenser
from schelling_explorer.domain.utility import (
    UtilityEvaluator,
    compare_evaluations,
    meets_tolerance,
)

__all__ = [
    "Agent",
    "BoundaryMode",
    "Coordinate",
    "Grid",
    "Group",
    "HappinessState",
    "NeighborhoodBuffer",
    "PopulationDispenser",
    "StateColorMap",
    "UtilityEvaluator",
    "compare_evaluations",
    "group_id_of",
    "is_unhappy_value",
    "meets_tolerance",
    "neighborhood_size",
]
