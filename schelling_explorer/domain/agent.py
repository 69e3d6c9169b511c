"""Mobile agent: a group member at a grid coordinate with a happiness state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schelling_explorer.domain.group import Group, HappinessState
from schelling_explorer.domain.utility import meets_tolerance

if TYPE_CHECKING:
    from schelling_explorer.domain.grid import Grid


class Agent:
    """A single occupant of the grid.

    The group is shared, never owned: every agent of a group references the
    same ``Group`` instance.
    """

    __slots__ = ("group", "x", "y", "state")

    def __init__(self, group: Group, x: int, y: int) -> None:
        if group is None:
            raise TypeError("group must not be None")
        if x < 0:
            raise ValueError("x must be >= 0")
        if y < 0:
            raise ValueError("y must be >= 0")
        self.group = group
        self.x = x
        self.y = y
        self.state = HappinessState.UNHAPPY

    def __repr__(self) -> str:
        return (
            f"Agent(group={self.group.name!r}, x={self.x}, y={self.y}, "
            f"state={self.state.value})"
        )

    @property
    def location(self) -> tuple[int, int]:
        return (self.x, self.y)

    def set_location(self, x: int, y: int) -> None:
        if x < 0:
            raise ValueError("x must be >= 0")
        if y < 0:
            raise ValueError("y must be >= 0")
        self.x = x
        self.y = y

    def update_state(self, evaluation: float) -> HappinessState:
        """Become happy iff ``evaluation`` meets the group tolerance.

        NaN (no occupied neighbors under the relative evaluator) orders above
        every number, so it always meets the tolerance.
        """
        if meets_tolerance(evaluation, self.group.tolerance):
            self.state = HappinessState.HAPPY
        else:
            self.state = HappinessState.UNHAPPY
        return self.state

    def write_to(self, grid: Grid) -> None:
        """Store this agent's group/state mask at its coordinate."""
        grid.set(self.x, self.y, self.group.state_mask(self.state))
