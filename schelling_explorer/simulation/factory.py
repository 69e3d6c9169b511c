"""Builders for ready-to-start models and groups read from configuration."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from schelling_explorer.config.constants import DEFAULT_GROUP_COLORS, GRID_HEIGHT, GRID_WIDTH
from schelling_explorer.domain.group import Group
from schelling_explorer.simulation.engine import SchellingModel

DEFAULT_GROUP_NAMES = ("Group A", "Group B")

_GROUP_KEYS = frozenset({"name", "population", "tolerance", "happy_color", "unhappy_color"})


def groups_from_config(entries: Sequence[Mapping[str, Any]]) -> list[Group]:
    """Build groups from ``{name, population, tolerance, ...}`` mappings.

    Group ids follow list order.  Colors are optional; the first two groups
    fall back to the default palette.
    """
    if entries is None:
        raise TypeError("entries must not be None")
    groups: list[Group] = []
    for index, entry in enumerate(entries):
        unknown = sorted(set(entry) - _GROUP_KEYS)
        if unknown:
            raise KeyError(f"unknown group key(s): {', '.join(unknown)}")
        if "name" not in entry:
            raise KeyError(f"group entry {index} has no name")
        group = Group(str(entry["name"]), index)
        group.population_percentage = entry.get("population", 0.0)
        group.tolerance = entry.get("tolerance", 0.0)
        if index < len(DEFAULT_GROUP_COLORS):
            group.happy_color, group.unhappy_color = DEFAULT_GROUP_COLORS[index]
        if "happy_color" in entry:
            group.happy_color = entry["happy_color"]
        if "unhappy_color" in entry:
            group.unhappy_color = entry["unhappy_color"]
        groups.append(group)
    return groups


def create_two_group_model(
    seed: int,
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
) -> SchellingModel:
    """Model with two equal groups of tolerance 0.5 and default parameters."""
    model = SchellingModel(seed, width=width, height=height)
    entries = [
        {"name": name, "population": 0.5, "tolerance": 0.5} for name in DEFAULT_GROUP_NAMES
    ]
    for group in groups_from_config(entries):
        model.add_group(group)
    return model
