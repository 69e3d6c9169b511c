"""Tests for schelling_explorer.domain.group."""

from __future__ import annotations

import logging

import pytest

from schelling_explorer.config.constants import EMPTY_CELL
from schelling_explorer.domain.group import (
    Group,
    HappinessState,
    group_id_of,
    is_unhappy_value,
)


class TestStateMasks:
    def test_group_zero_masks(self) -> None:
        group = Group("A", 0)
        assert group.happy_state_mask == 0
        assert group.unhappy_state_mask == -(2**31)

    def test_masks_encode_group_id(self) -> None:
        group = Group("B", 3)
        assert group.happy_state_mask == 3 << 16
        assert group.unhappy_state_mask < 0
        assert group_id_of(group.happy_state_mask) == 3
        assert group_id_of(group.unhappy_state_mask) == 3

    def test_state_mask_selects_by_state(self) -> None:
        group = Group("C", 7)
        assert group.state_mask(HappinessState.HAPPY) == group.happy_state_mask
        assert group.state_mask(HappinessState.UNHAPPY) == group.unhappy_state_mask
        with pytest.raises(TypeError):
            group.state_mask(None)  # type: ignore[arg-type]

    def test_membership(self) -> None:
        a, b = Group("A", 1), Group("B", 2)
        assert a.is_member(a.unhappy_state_mask)
        assert not a.is_member(b.happy_state_mask)
        assert not a.is_member(EMPTY_CELL)

    def test_unhappy_value_detection(self) -> None:
        group = Group("A", 4)
        assert is_unhappy_value(group.unhappy_state_mask)
        assert not is_unhappy_value(group.happy_state_mask)
        assert not is_unhappy_value(EMPTY_CELL)


class TestGroupValidation:
    @pytest.mark.parametrize("group_id", [-1, 255, 1000])
    def test_group_id_range(self, group_id: int) -> None:
        with pytest.raises(ValueError):
            Group("A", group_id)

    def test_highest_group_id_is_accepted(self) -> None:
        assert Group("Z", 254).group_id == 254

    def test_name_must_not_be_none(self) -> None:
        with pytest.raises(TypeError):
            Group(None, 0)  # type: ignore[arg-type]

    def test_tolerance_rejection_keeps_previous(self, caplog: pytest.LogCaptureFixture) -> None:
        group = Group("A", 0)
        group.tolerance = 0.3
        with caplog.at_level(logging.WARNING, logger="schelling_explorer.domain.group"):
            with pytest.raises(ValueError):
                group.tolerance = 1.5
        assert group.tolerance == 0.3
        assert "tolerance" in caplog.text

    def test_population_percentage_range(self) -> None:
        group = Group("A", 0)
        group.population_percentage = 1.0
        with pytest.raises(ValueError):
            group.population_percentage = -0.2
        assert group.population_percentage == 1.0

    def test_colors_are_normalized(self) -> None:
        group = Group("A", 0)
        group.happy_color = "#00FF00"
        assert group.happy_color == "#00ff00"
        with pytest.raises(ValueError):
            group.unhappy_color = "green"
        with pytest.raises(TypeError):
            group.unhappy_color = None  # type: ignore[assignment]


def test_groups_compare_by_identity() -> None:
    assert Group("A", 0) != Group("A", 0)
