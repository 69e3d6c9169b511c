"""Categorical groups, happiness states, and packed cell values.

A non-empty cell holds ``group_id << 16``, with the sign bit set when the
occupant is unhappy.  Values are signed 32-bit integers, so the unhappy mask
of every group is negative and ``EMPTY_CELL`` (-1) decodes to group 0xFF,
which no group may use.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from schelling_explorer.config.constants import (
    DEFAULT_HAPPY_COLOR,
    DEFAULT_UNHAPPY_COLOR,
    EMPTY_CELL,
    GROUP_ID_MASK,
    GROUP_ID_SHIFT,
    MAX_GROUP_ID,
    UNHAPPY_BIT,
)

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class HappinessState(Enum):
    """Outcome of comparing a neighborhood evaluation to a tolerance."""

    HAPPY = "happy"
    UNHAPPY = "unhappy"


def group_id_of(value: int) -> int:
    """Recover the group identifier packed into a cell value."""
    return (value >> GROUP_ID_SHIFT) & GROUP_ID_MASK


def is_unhappy_value(value: int) -> bool:
    """True when ``value`` is an occupied cell whose occupant is unhappy."""
    return value != EMPTY_CELL and value < 0


def _check_fraction(label: str, value: float) -> float:
    value = float(value)
    # NaN fails both comparisons, so test the accepted range directly.
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{label} must be in [0.0, 1.0], got {value}")
    return value


def _check_color(label: str, value: str) -> str:
    if value is None:
        raise TypeError(f"{label} must not be None")
    if not _HEX_COLOR.match(value):
        raise ValueError(f"{label} must be a #rrggbb hex string, got {value!r}")
    return value.lower()


class Group:
    """Identity, display metadata, quota, and tolerance of one population."""

    def __init__(self, name: str, group_id: int) -> None:
        if name is None:
            raise TypeError("name must not be None")
        if not 0 <= group_id <= MAX_GROUP_ID:
            raise ValueError(f"group_id must be in [0, {MAX_GROUP_ID}]")
        self._group_id = group_id
        self._name = name
        self._population_percentage = 0.0
        self._tolerance = 0.0
        self._happy_color = DEFAULT_HAPPY_COLOR
        self._unhappy_color = DEFAULT_UNHAPPY_COLOR
        self._happy_mask = group_id << GROUP_ID_SHIFT
        self._unhappy_mask = UNHAPPY_BIT | (group_id << GROUP_ID_SHIFT)

    def __repr__(self) -> str:
        return (
            f"Group(name={self._name!r}, group_id={self._group_id}, "
            f"population_percentage={self._population_percentage}, "
            f"tolerance={self._tolerance})"
        )

    def __str__(self) -> str:
        return self._name

    @property
    def group_id(self) -> int:
        return self._group_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if value is None:
            raise TypeError("name must not be None")
        self._name = value

    @property
    def population_percentage(self) -> float:
        """Share of the occupied cells assigned to this group, in [0, 1]."""
        return self._population_percentage

    @population_percentage.setter
    def population_percentage(self, value: float) -> None:
        try:
            self._population_percentage = _check_fraction("population_percentage", value)
        except ValueError:
            logger.warning("Rejected population_percentage=%r for %s", value, self._name)
            raise

    @property
    def tolerance(self) -> float:
        """Minimum same-group neighbor fraction needed to be happy."""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        try:
            self._tolerance = _check_fraction("tolerance", value)
        except ValueError:
            logger.warning("Rejected tolerance=%r for %s", value, self._name)
            raise

    @property
    def happy_color(self) -> str:
        return self._happy_color

    @happy_color.setter
    def happy_color(self, value: str) -> None:
        self._happy_color = _check_color("happy_color", value)

    @property
    def unhappy_color(self) -> str:
        return self._unhappy_color

    @unhappy_color.setter
    def unhappy_color(self, value: str) -> None:
        self._unhappy_color = _check_color("unhappy_color", value)

    @property
    def happy_state_mask(self) -> int:
        return self._happy_mask

    @property
    def unhappy_state_mask(self) -> int:
        return self._unhappy_mask

    def state_mask(self, state: HappinessState) -> int:
        """Cell value written for an occupant of this group in ``state``."""
        if state is HappinessState.HAPPY:
            return self._happy_mask
        if state is HappinessState.UNHAPPY:
            return self._unhappy_mask
        raise TypeError(f"expected a HappinessState, got {state!r}")

    def is_member(self, value: int) -> bool:
        """True when the packed cell ``value`` belongs to this group."""
        return group_id_of(value) == self._group_id
