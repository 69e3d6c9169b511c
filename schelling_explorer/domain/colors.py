"""Cell-value to display-color mapping consumed by rendering collaborators."""

from __future__ import annotations

from collections.abc import Iterable

from schelling_explorer.config.constants import EMPTY_CELL, EMPTY_COLOR
from schelling_explorer.domain.group import Group


class StateColorMap:
    """One-to-one map from packed cell values to ``#rrggbb`` colors."""

    def __init__(self) -> None:
        self._mappings: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._mappings)

    def __contains__(self, value: object) -> bool:
        return value in self._mappings

    def add_mapping(self, value: int, color: str) -> None:
        if color is None:
            raise TypeError("color must not be None")
        if value in self._mappings:
            raise RuntimeError(
                f"value {value} is already mapped to {self._mappings[value]}, not {color}"
            )
        self._mappings[value] = color

    def add_group(self, group: Group, show_unhappy: bool = True) -> None:
        """Map both states of ``group``.

        With ``show_unhappy`` off, unhappy occupants are drawn in the happy
        color so only group identity is visible.
        """
        self.add_mapping(group.happy_state_mask, group.happy_color)
        unhappy = group.unhappy_color if show_unhappy else group.happy_color
        self.add_mapping(group.unhappy_state_mask, unhappy)

    def remove_mapping(self, value: int) -> None:
        if value not in self._mappings:
            raise KeyError(f"no mapping found for {value}")
        del self._mappings[value]

    def color_of(self, value: int) -> str | None:
        return self._mappings.get(value)

    def clear(self) -> None:
        self._mappings.clear()

    def as_dict(self) -> dict[int, str]:
        return dict(self._mappings)

    @classmethod
    def for_groups(
        cls,
        groups: Iterable[Group],
        empty_color: str = EMPTY_COLOR,
        show_unhappy: bool = True,
    ) -> StateColorMap:
        """Build the map a grid renderer needs for ``groups``."""
        color_map = cls()
        color_map.add_mapping(EMPTY_CELL, empty_color)
        for group in groups:
            color_map.add_group(group, show_unhappy=show_unhappy)
        return color_map
