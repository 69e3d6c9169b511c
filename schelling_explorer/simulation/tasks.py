"""The four per-tick phases, run in order: Movement, Update, Statistics, StopCondition."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from schelling_explorer.domain.group import HappinessState

if TYPE_CHECKING:
    from schelling_explorer.simulation.engine import SchellingModel

logger = logging.getLogger(__name__)


class StopReason(Enum):
    """Why a run stopped."""

    MAXIMUM_STEPS = "maximum_steps"
    EQUILIBRIUM = "equilibrium"
    FINISHED = "finished"
    INVARIANT_VIOLATION = "invariant_violation"


class Task(Protocol):
    def step(self, model: SchellingModel) -> None: ...


class MovementTask:
    """Drain the queue built by the previous tick's Update phase."""

    def step(self, model: SchellingModel) -> None:
        ruleset = model.ruleset
        model.last_relocations = ruleset.agent_updater.update(ruleset.movement_method, model)


class UpdateTask:
    """Re-evaluate every agent in a freshly shuffled order and refill the queue."""

    def step(self, model: SchellingModel) -> None:
        ruleset = model.ruleset
        rng = model.rng
        grid = model.grid
        buffer = model.neighborhood_buffer
        evaluator = ruleset.utility_evaluator
        radius = ruleset.search_radius
        mode = ruleset.boundary_mode
        allows_happy = ruleset.dynamics.allows_happy_relocation
        chance = ruleset.movement_chance
        move_list = model.move_list

        agents = model.agents
        rng.shuffle(agents)
        for agent in agents:
            evaluation = evaluator.evaluate(
                grid, agent.group, agent.x, agent.y, radius, mode, buffer
            )
            state = agent.update_state(evaluation)
            agent.write_to(grid)
            if state is HappinessState.UNHAPPY or (allows_happy and rng.random() <= chance):
                move_list.append(agent)


class StatisticsTask:
    """Hand the finished tick to every registered statistics observer."""

    def step(self, model: SchellingModel) -> None:
        for observer in model.statistics_observers:
            observer(model)


class StopConditionTask:
    """Halt on the tick budget or, optionally, at equilibrium.

    Keeps its own tick counter rather than reading the model's step count,
    and reads the live parameters so the budget can be raised mid-run.
    """

    def __init__(self) -> None:
        self.counter = 0

    def step(self, model: SchellingModel) -> None:
        self.counter += 1
        params = model.parameters
        if self.counter >= params.maximum_steps:
            model.finish(StopReason.MAXIMUM_STEPS)
        elif params.stop_on_equilibrium and not any(
            agent.state is HappinessState.UNHAPPY for agent in model.move_list
        ):
            model.finish(StopReason.EQUILIBRIUM)
