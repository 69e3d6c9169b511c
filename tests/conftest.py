"""Shared fixtures: groups and small, fast models."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from schelling_explorer.domain.group import Group
from schelling_explorer.simulation.engine import SchellingModel


def _make_group(name: str, group_id: int, population: float, tolerance: float) -> Group:
    group = Group(name, group_id)
    group.population_percentage = population
    group.tolerance = tolerance
    return group


@pytest.fixture
def group_a() -> Group:
    return _make_group("A", 0, 0.5, 0.5)


@pytest.fixture
def group_b() -> Group:
    return _make_group("B", 1, 0.5, 0.5)


@pytest.fixture
def make_model() -> Callable[..., SchellingModel]:
    """Factory for unstarted models; extra keywords go to ``Parameters.update``."""

    def _make(
        seed: int = 0,
        width: int = 10,
        height: int = 10,
        populations: Sequence[float] = (0.5, 0.5),
        tolerance: float = 0.5,
        **params: Any,
    ) -> SchellingModel:
        model = SchellingModel(seed, width=width, height=height)
        for index, population in enumerate(populations):
            model.add_group(_make_group(f"G{index}", index, population, tolerance))
        model.parameters.update(params)
        return model

    return _make
