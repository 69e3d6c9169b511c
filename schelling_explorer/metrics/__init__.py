"""Statistics computed from model state and collected per tick."""

from schelling_explorer.metrics.population import percent_unhappy
from schelling_explorer.metrics.spatial import interface_density, occupancy_count
from schelling_explorer.metrics.tracker import INTERFACE_DENSITY_SERIES, StatisticsTracker

__all__ = [
    "INTERFACE_DENSITY_SERIES",
    "StatisticsTracker",
    "interface_density",
    "occupancy_count",
    "percent_unhappy",
]
