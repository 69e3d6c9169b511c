"""Simulation layer: movement strategies, dynamics policies, updaters, and phases.

The engine itself lives in ``schelling_explorer.simulation.engine``; it is not
re-exported here because the typed configuration it consumes depends on the
variant enums defined in this package.
"""

from schelling_explorer.simulation.dynamics import SimulationDynamics
from schelling_explorer.simulation.movement import MovementMethod, compute_candidates
from schelling_explorer.simulation.tasks import (
    MovementTask,
    StatisticsTask,
    StopConditionTask,
    StopReason,
    UpdateTask,
)
from schelling_explorer.simulation.updater import AgentUpdater

__all__ = [
    "AgentUpdater",
    "MovementMethod",
    "MovementTask",
    "SimulationDynamics",
    "StatisticsTask",
    "StopConditionTask",
    "StopReason",
    "UpdateTask",
    "compute_candidates",
]
