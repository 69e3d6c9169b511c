"""Relocation algorithms: search-based physical moves and direct swaps.

Each ``MovementMethod.move`` call handles exactly one relocation event and
draws from the model's shared RNG in a fixed order, so runs reproduce for a
given seed.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from schelling_explorer.domain.group import HappinessState
from schelling_explorer.domain.utility import compare_evaluations, meets_tolerance

if TYPE_CHECKING:
    from schelling_explorer.domain.agent import Agent
    from schelling_explorer.simulation.engine import SchellingModel


def _evaluate_at(agent: Agent, x: int, y: int, model: SchellingModel) -> float:
    ruleset = model.ruleset
    return ruleset.utility_evaluator.evaluate(
        model.grid,
        agent.group,
        x,
        y,
        ruleset.search_radius,
        ruleset.boundary_mode,
        model.neighborhood_buffer,
    )


def _candidate_value(agent: Agent, x: int, y: int, model: SchellingModel) -> float:
    """Evaluation at a candidate cell, with anything meeting tolerance scored 1.0."""
    evaluation = _evaluate_at(agent, x, y, model)
    if meets_tolerance(evaluation, agent.group.tolerance):
        return 1.0
    return evaluation


def compute_candidates(agent: Agent, model: SchellingModel) -> list[int]:
    """Sample empty cells and return the indices of the best ones found.

    Up to ``min(search_limit, len(empty_cells))`` distinct cells are drawn by
    a partial Knuth shuffle that moves each sampled cell to the front of the
    shared empty-cell list.  The baseline is 1.0 for a happy agent and the
    raw evaluation of its current cell otherwise; candidates are compared
    after the meets-tolerance cap.  A strictly better value restarts the
    candidate set and ties join it.
    """
    empty_cells = model.empty_cells
    rng = model.rng
    limit = min(len(empty_cells), model.ruleset.search_limit)
    if agent.state is HappinessState.HAPPY:
        best = 1.0
    else:
        best = _evaluate_at(agent, agent.x, agent.y, model)

    candidates: list[int] = []
    for i in range(limit):
        swap_index = i + rng.randrange(len(empty_cells) - i)
        empty_cells[i], empty_cells[swap_index] = empty_cells[swap_index], empty_cells[i]
        x, y = empty_cells[i]
        value = _candidate_value(agent, x, y, model)
        comparison = compare_evaluations(value, best)
        if comparison >= 0:
            if comparison > 0:
                candidates.clear()
                best = value
            candidates.append(i)
    return candidates


def _physical_move(model: SchellingModel) -> None:
    queue = model.move_list
    rng = model.rng
    agent = queue.pop(rng.randrange(len(queue)))
    candidates = compute_candidates(agent, model)
    if candidates:
        model.move_agent_to_empty(agent, candidates[rng.randrange(len(candidates))])


def _swap_move(model: SchellingModel) -> None:
    queue = model.move_list
    rng = model.rng
    first = queue.pop(rng.randrange(len(queue)))
    second = queue.pop(rng.randrange(len(queue)))
    model.swap_agents(first, second)


class MovementMethod(Enum):
    """Closed set of relocation strategies."""

    PHYSICAL = "physical"
    SWAP = "swap"

    @property
    def minimum_agents_required(self) -> int:
        """Queue length a single ``move`` call consumes at most."""
        return 1 if self is MovementMethod.PHYSICAL else 2

    def move(self, model: SchellingModel) -> None:
        """Run one relocation event against the model's move queue."""
        if len(model.move_list) < self.minimum_agents_required:
            raise ValueError(
                f"{self.name} movement needs {self.minimum_agents_required} queued agents, "
                f"found {len(model.move_list)}"
            )
        if self is MovementMethod.PHYSICAL:
            _physical_move(model)
        else:
            _swap_move(model)
