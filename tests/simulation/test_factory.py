"""Tests for schelling_explorer.simulation.factory."""

from __future__ import annotations

import pytest

from schelling_explorer.config.constants import DEFAULT_GROUP_COLORS, GRID_WIDTH
from schelling_explorer.simulation.factory import create_two_group_model, groups_from_config


class TestCreateTwoGroupModel:
    def test_two_even_groups(self) -> None:
        model = create_two_group_model(3, width=8, height=8)
        assert [g.name for g in model.groups] == ["Group A", "Group B"]
        assert [g.group_id for g in model.groups] == [0, 1]
        for group in model.groups:
            assert group.population_percentage == 0.5
            assert group.tolerance == 0.5

    def test_default_size_and_palette(self) -> None:
        model = create_two_group_model(3)
        assert model.parameters.width == GRID_WIDTH
        assert (model.groups[0].happy_color, model.groups[0].unhappy_color) == (
            DEFAULT_GROUP_COLORS[0]
        )

    def test_model_starts(self) -> None:
        model = create_two_group_model(3, width=8, height=8)
        model.start()
        assert len(model.agents) == 63


class TestGroupsFromConfig:
    def test_builds_groups_in_order(self) -> None:
        groups = groups_from_config(
            [
                {"name": "red", "population": 0.6, "tolerance": 0.3},
                {"name": "blue", "population": 0.3, "tolerance": 0.7},
                {"name": "green", "population": 0.1, "happy_color": "#00FF00"},
            ]
        )
        assert [g.group_id for g in groups] == [0, 1, 2]
        assert groups[1].tolerance == 0.7
        assert groups[2].tolerance == 0.0
        assert groups[2].happy_color == "#00ff00"

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            groups_from_config([{"name": "x", "size": 3}])

    def test_missing_name(self) -> None:
        with pytest.raises(KeyError):
            groups_from_config([{"population": 1.0}])

    def test_invalid_tolerance(self) -> None:
        with pytest.raises(ValueError):
            groups_from_config([{"name": "x", "tolerance": 2.0}])
