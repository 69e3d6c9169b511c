"""Simulation engine: run lifecycle, grid initialization, and tick scheduling.

Every random draw of a run comes from one ``random.Random`` stream, in this
order: population dispensing, grid shuffling, then per tick the movement
draws, the agent-order shuffle, and the happy-relocation coin flips.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from random import Random

import numpy as np

from schelling_explorer.config.constants import EMPTY_CELL, GRID_HEIGHT, GRID_WIDTH
from schelling_explorer.config.types import Parameters, Ruleset
from schelling_explorer.domain.agent import Agent
from schelling_explorer.domain.grid import Coordinate, Grid, NeighborhoodBuffer
from schelling_explorer.domain.group import Group, HappinessState
from schelling_explorer.domain.population import PopulationDispenser
from schelling_explorer.simulation.tasks import (
    MovementTask,
    StatisticsTask,
    StopConditionTask,
    StopReason,
    Task,
    UpdateTask,
)

logger = logging.getLogger(__name__)

StatisticsObserver = Callable[["SchellingModel"], None]


class SimulationInvariantError(RuntimeError):
    """Engine state became inconsistent; the run is aborted."""


def shuffle_grid(grid: Grid, rng: Random) -> None:
    """Scramble the grid with a nested, per-axis Fisher-Yates variant.

    For ``i`` from ``width - 1`` down to 1 and, inside it, ``j`` from
    ``height - 1`` down to 1, cell ``(i, j)`` is swapped with ``(m, n)``
    where ``m`` is drawn from ``[0, i]`` and then ``n`` from ``[0, j]``.
    Row 0 and column 0 are only ever swap targets.  This is not a uniform
    permutation of the grid and must stay exactly as written to keep seeded
    runs reproducible.
    """
    for i in range(grid.width - 1, 0, -1):
        for j in range(grid.height - 1, 0, -1):
            m = rng.randrange(i + 1)
            n = rng.randrange(j + 1)
            grid.swap_cells((i, j), (m, n))


class SchellingModel:
    """Segregation model state plus the per-tick schedule that drives it.

    Usage::

        model = SchellingModel(seed=7, width=20, height=20)
        model.add_group(group_a)
        model.add_group(group_b)
        model.start()
        model.run()
    """

    def __init__(
        self,
        seed: int,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        check_invariants: bool = False,
    ) -> None:
        self.seed = seed
        self.rng = Random(seed)
        self.parameters = Parameters()
        self.parameters.width = width
        self.parameters.height = height
        self.ruleset = Ruleset()
        self.grid = Grid(width, height)
        self.groups: list[Group] = []
        self.agents: list[Agent] = []
        self.empty_cells: list[Coordinate] = []
        self.move_list: list[Agent] = []
        self.group_totals: dict[int, int] = {}
        self.neighborhood_buffer = NeighborhoodBuffer()
        self.statistics_observers: list[StatisticsObserver] = []
        self.check_invariants_each_tick = check_invariants
        self.steps = 0
        self.last_relocations = 0
        self.stop_reason: StopReason | None = None
        self._dispenser = PopulationDispenser()
        self._tasks: list[Task] = []
        self._started = False
        self._finished = False

    # ------------------------------------------------------------------
    # Group registry
    # ------------------------------------------------------------------

    def add_group(self, group: Group) -> None:
        if group is None:
            raise TypeError("group must not be None")
        if any(existing.group_id == group.group_id for existing in self.groups):
            raise ValueError(f"group_id {group.group_id} is already registered")
        self.groups.append(group)

    def remove_group(self, group: Group) -> None:
        if group is None:
            raise TypeError("group must not be None")
        try:
            self.groups.remove(group)
        except ValueError:
            raise KeyError(f"group {group.name!r} is not registered") from None

    def group(self, index: int) -> Group:
        return self.groups[index]

    def group_by_name(self, name: str) -> Group:
        if name is None:
            raise TypeError("name must not be None")
        for group in self.groups:
            if group.name == name:
                return group
        raise KeyError(f"could not find group: {name}")

    def add_statistics_observer(self, observer: StatisticsObserver) -> None:
        if observer is None:
            raise TypeError("observer must not be None")
        self.statistics_observers.append(observer)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self, seed: int | None = None) -> None:
        """Begin a new run from the current parameters and groups.

        Without ``seed`` the RNG stream continues from the previous run.
        """
        if not self.groups:
            raise ValueError("at least one group must be registered before start()")
        if seed is not None:
            self.seed = seed
            self.rng = Random(seed)
        self._reset()
        self.ruleset = Ruleset.from_parameters(self.parameters)
        self._populate_grid()
        for _ in range(self.parameters.shuffle_times):
            shuffle_grid(self.grid, self.rng)
        self._collect_agents_and_empty_cells()
        self._tasks = [MovementTask(), UpdateTask(), StatisticsTask(), StopConditionTask()]
        self._started = True
        logger.info(
            "Started run seed=%s grid=%dx%d agents=%d empty=%d "
            "dynamics=%s utility=%s updater=%s",
            self.seed,
            self.grid.width,
            self.grid.height,
            len(self.agents),
            len(self.empty_cells),
            self.ruleset.dynamics.value,
            self.ruleset.utility_evaluator.value,
            self.ruleset.agent_updater.value,
        )

    def _reset(self) -> None:
        self._started = False
        self._tasks = []
        self.agents.clear()
        self.empty_cells.clear()
        self.move_list.clear()
        self.group_totals.clear()
        self._dispenser.clear()
        self.steps = 0
        self.last_relocations = 0
        self.stop_reason = None
        self._finished = False
        width = self.parameters.width
        height = self.parameters.height
        if (self.grid.width, self.grid.height) != (width, height):
            self.grid = Grid(width, height)
        else:
            self.grid.fill(EMPTY_CELL)

    def _populate_grid(self) -> None:
        """Fill cells x-major with dispensed group indices, leaving the tail empty."""
        total_cells = self.grid.width * self.grid.height
        empty = 0
        if self.ruleset.dynamics.allows_empty_cells:
            empty = math.floor(total_cells * self.parameters.percent_empty)
        self._dispenser.initialize(self.groups, total_cells - empty, False)
        for x in range(self.grid.width):
            for y in range(self.grid.height):
                self.grid.set(x, y, self._dispenser.next_agent(self.rng))
                if not self._dispenser.has_more():
                    return

    def _collect_agents_and_empty_cells(self) -> None:
        """Turn dispensed group indices into agents and record empty cells."""
        for x in range(self.grid.width):
            for y in range(self.grid.height):
                value = self.grid.get(x, y)
                if value == EMPTY_CELL:
                    self.empty_cells.append((x, y))
                    continue
                group = self.groups[value]
                self.agents.append(Agent(group, x, y))
                self.group_totals[group.group_id] = self.group_totals.get(group.group_id, 0) + 1
                # Placeholder until the first Update phase evaluates the agent.
                self.grid.set(x, y, group.happy_state_mask)

    def step(self) -> bool:
        """Run one tick; return whether the run is still going."""
        if not self._started:
            raise RuntimeError("start() must be called before step()")
        if self._finished:
            return False
        try:
            for task in self._tasks:
                task.step(self)
            if self.check_invariants_each_tick:
                self.check_invariants()
        except SimulationInvariantError:
            self.finish(StopReason.INVARIANT_VIOLATION)
            raise
        self.steps += 1
        logger.debug(
            "tick=%d relocations=%d queued=%d",
            self.steps,
            self.last_relocations,
            len(self.move_list),
        )
        return not self._finished

    def run(self, max_ticks: int | None = None) -> int:
        """Step until the run finishes (or ``max_ticks`` elapse); return ticks run."""
        ticks = 0
        while not self._finished and (max_ticks is None or ticks < max_ticks):
            self.step()
            ticks += 1
        return ticks

    def finish(self, reason: StopReason = StopReason.FINISHED) -> None:
        """Stop the run.  Repeated calls keep the first reason."""
        if self._finished:
            return
        self._finished = True
        self.stop_reason = reason
        logger.info("Run finished after %d steps: %s", self.steps, reason.value)

    # ------------------------------------------------------------------
    # Relocation primitives used by the movement methods
    # ------------------------------------------------------------------

    def _require_occupant(self, agent: Agent) -> None:
        value = self.grid.get(agent.x, agent.y)
        if value == EMPTY_CELL or not agent.group.is_member(value):
            raise SimulationInvariantError(
                f"{agent!r} is not recorded at ({agent.x}, {agent.y}); cell holds {value}"
            )

    def swap_agents(self, first: Agent, second: Agent) -> None:
        """Exchange the coordinates of two agents and rewrite both cells."""
        if first is second:
            raise SimulationInvariantError(f"{first!r} cannot swap with itself")
        self._require_occupant(first)
        self._require_occupant(second)
        first_x, first_y = first.x, first.y
        first.set_location(second.x, second.y)
        second.set_location(first_x, first_y)
        first.write_to(self.grid)
        second.write_to(self.grid)

    def move_agent_to_empty(self, agent: Agent, index: int) -> None:
        """Move ``agent`` into ``empty_cells[index]``.

        The list entry is overwritten with the agent's former coordinate, so
        the empty-cell list keeps its length and its one-to-one match with the
        grid.
        """
        self._require_occupant(agent)
        target_x, target_y = self.empty_cells[index]
        if self.grid.get(target_x, target_y) != EMPTY_CELL:
            raise SimulationInvariantError(
                f"empty-cell entry ({target_x}, {target_y}) is occupied"
            )
        old_x, old_y = agent.x, agent.y
        agent.set_location(target_x, target_y)
        agent.write_to(self.grid)
        self.empty_cells[index] = (old_x, old_y)
        self.grid.set(old_x, old_y, EMPTY_CELL)

    def check_invariants(self) -> None:
        """Verify agents, grid, and empty-cell list agree; raise on mismatch."""
        seen: set[Coordinate] = set()
        for agent in self.agents:
            location = (agent.x, agent.y)
            if location in seen:
                raise SimulationInvariantError(f"two agents occupy {location}")
            seen.add(location)
            # State bits are only in sync after the first Update phase.
            actual = self.grid.get(agent.x, agent.y)
            if actual == EMPTY_CELL or not agent.group.is_member(actual):
                raise SimulationInvariantError(
                    f"{agent!r} is not recorded at ({agent.x}, {agent.y}); cell holds {actual}"
                )
        empty = set(self.empty_cells)
        if len(empty) != len(self.empty_cells):
            raise SimulationInvariantError("empty-cell list holds duplicates")
        if seen & empty:
            raise SimulationInvariantError("a coordinate is both occupied and listed empty")
        if len(seen) + len(empty) != self.grid.width * self.grid.height:
            raise SimulationInvariantError("occupied and empty cells do not cover the grid")
        if self.grid.count(EMPTY_CELL) != len(empty):
            raise SimulationInvariantError("empty-cell list disagrees with the grid")

    # ------------------------------------------------------------------
    # Read-only views for collaborators
    # ------------------------------------------------------------------

    def unhappy_queued(self) -> int:
        return sum(1 for agent in self.move_list if agent.state is HappinessState.UNHAPPY)

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the grid's cell values."""
        return self.grid.snapshot()
