"""Simulation dynamics policies: which movement runs and what it may assume."""

from __future__ import annotations

from enum import Enum

from schelling_explorer.simulation.movement import MovementMethod


class SimulationDynamics(Enum):
    """Liquid, solid, or swap dynamics.

    LIQUID and SOLID relocate agents into empty cells; LIQUID also lets happy
    agents queue for relocation at the configured movement chance.  SWAP
    fills the grid completely and exchanges pairs of agents.
    """

    LIQUID = "liquid"
    SOLID = "solid"
    SWAP = "swap"

    @property
    def allows_empty_cells(self) -> bool:
        return self is not SimulationDynamics.SWAP

    @property
    def allows_happy_relocation(self) -> bool:
        return self is SimulationDynamics.LIQUID

    @property
    def movement_method(self) -> MovementMethod:
        if self is SimulationDynamics.SWAP:
            return MovementMethod.SWAP
        return MovementMethod.PHYSICAL
