"""Per-tick statistics series: interface density plus unhappy share per group."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from schelling_explorer.metrics.population import percent_unhappy
from schelling_explorer.metrics.spatial import interface_density

if TYPE_CHECKING:
    from schelling_explorer.simulation.engine import SchellingModel

logger = logging.getLogger(__name__)

INTERFACE_DENSITY_SERIES = "interface_density"
"""Series name of the interface-density curve."""


class StatisticsTracker:
    """Collects one point per tick for every series.

    Register an instance as a statistics observer of the model; it is called
    once per tick after the Update phase.  With ``capacity`` set, each series
    keeps only its most recent ``capacity`` points.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._series: dict[str, deque[tuple[int, float]]] | None = None

    def __call__(self, model: SchellingModel) -> None:
        self.record(model)

    @property
    def initialized(self) -> bool:
        return self._series is not None

    def initialize(self, model: SchellingModel) -> None:
        """(Re)create empty series for ``model``'s current groups."""
        names = [INTERFACE_DENSITY_SERIES] + [group.name for group in model.groups]
        if len(set(names)) != len(names):
            raise ValueError("group names must be unique and differ from the density series")
        self._series = {name: deque(maxlen=self.capacity) for name in names}
        logger.debug("Tracking series: %s", ", ".join(names))

    def _require_series(self) -> dict[str, deque[tuple[int, float]]]:
        if self._series is None:
            raise RuntimeError("initialize() must be called first")
        return self._series

    def record(self, model: SchellingModel) -> None:
        """Append the current tick's values; the tick is ``model.steps + 1``."""
        series = self._require_series()
        tick = model.steps + 1
        ruleset = model.ruleset
        density = interface_density(model.grid.cells, ruleset.search_radius, ruleset.boundary_mode)
        series[INTERFACE_DENSITY_SERIES].append((tick, density))
        unhappy = percent_unhappy(model)
        for group in model.groups:
            if group.name not in series:
                raise KeyError(f"group {group.name!r} was added after initialize()")
            series[group.name].append((tick, unhappy[group.group_id]))

    def series(self, name: str) -> list[tuple[int, float]]:
        """``(tick, value)`` points of one series, oldest first."""
        series = self._require_series()
        if name not in series:
            raise KeyError(f"unknown series: {name}")
        return list(series[name])

    def names(self) -> list[str]:
        return list(self._require_series())

    def latest(self) -> dict[str, float]:
        """Most recent value of every series that has at least one point."""
        return {name: points[-1][1] for name, points in self._require_series().items() if points}
