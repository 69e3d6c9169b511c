"""Per-group happiness metrics computed from engine state."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from schelling_explorer.domain.group import HappinessState

if TYPE_CHECKING:
    from schelling_explorer.simulation.engine import SchellingModel


def percent_unhappy(model: SchellingModel) -> dict[int, float]:
    """Percentage of each group's agents queued as unhappy, keyed by group id.

    Only the move queue is inspected, so this reads the state left by the
    latest Update phase.  A group with no agents reports NaN.
    """
    unhappy = Counter(
        agent.group.group_id
        for agent in model.move_list
        if agent.state is HappinessState.UNHAPPY
    )
    result: dict[int, float] = {}
    for group in model.groups:
        total = model.group_totals.get(group.group_id, 0)
        if total == 0:
            result[group.group_id] = float("nan")
        else:
            result[group.group_id] = 100.0 * unhappy[group.group_id] / total
    return result

