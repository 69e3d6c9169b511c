"""Tests for schelling_explorer.metrics.population."""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from schelling_explorer.domain.group import HappinessState
from schelling_explorer.metrics.population import percent_unhappy
from schelling_explorer.simulation.engine import SchellingModel

ModelFactory = Callable[..., SchellingModel]


def test_matches_queued_unhappy_agents(make_model: ModelFactory) -> None:
    model = make_model(percent_empty=0.1, dynamics="solid")
    model.start()
    model.step()
    result = percent_unhappy(model)
    for group in model.groups:
        unhappy = sum(
            1
            for agent in model.move_list
            if agent.group is group and agent.state is HappinessState.UNHAPPY
        )
        total = model.group_totals[group.group_id]
        assert result[group.group_id] == pytest.approx(100.0 * unhappy / total)
        assert 0.0 <= result[group.group_id] <= 100.0


def test_everyone_happy_is_zero(make_model: ModelFactory) -> None:
    model = make_model(tolerance=0.0, dynamics="solid")
    model.start()
    model.step()
    assert percent_unhappy(model) == {0: 0.0, 1: 0.0}


def test_group_without_agents_is_nan(make_model: ModelFactory) -> None:
    model = make_model(populations=(1.0, 0.0))
    model.start()
    model.step()
    result = percent_unhappy(model)
    assert math.isnan(result[1])
    assert not math.isnan(result[0])
