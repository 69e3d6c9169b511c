"""Per-tick consumption policies for the move queue."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from schelling_explorer.simulation.movement import MovementMethod

if TYPE_CHECKING:
    from schelling_explorer.simulation.engine import SchellingModel


class AgentUpdater(Enum):
    """How many relocation events one Movement phase runs.

    SINGLE runs at most one event and discards the rest of the queue; BATCH
    keeps running events while the queue still holds enough agents.  Either
    way the queue is empty afterwards.
    """

    BATCH = "batch"
    SINGLE = "single"

    def update(self, method: MovementMethod, model: SchellingModel) -> int:
        """Drain ``model.move_list`` through ``method``; return the event count."""
        if method is None:
            raise TypeError("method must not be None")
        queue = model.move_list
        minimum = method.minimum_agents_required
        events = 0
        if self is AgentUpdater.SINGLE:
            if len(queue) >= minimum:
                method.move(model)
                events = 1
        else:
            while len(queue) >= minimum:
                method.move(model)
                events += 1
        queue.clear()
        return events
