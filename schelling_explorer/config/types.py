"""Typed run configuration: mutable parameters and the frozen per-run ruleset.

``Parameters`` is the user-facing surface and may change at any time; each
setter validates and leaves the previous value in place on rejection.
``Ruleset`` is a frozen snapshot taken once at run start so a run never sees
a half-applied edit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from schelling_explorer.config.constants import (
    GRID_HEIGHT,
    GRID_WIDTH,
    MAXIMUM_STEPS,
    MOVE_CHANCE,
    PERCENT_EMPTY,
    SEARCH_LIMIT,
    SEARCH_RADIUS,
    SHUFFLE_TIMES,
    STOP_ON_EQUILIBRIUM,
)
from schelling_explorer.domain.grid import BoundaryMode
from schelling_explorer.domain.utility import UtilityEvaluator
from schelling_explorer.simulation.dynamics import SimulationDynamics
from schelling_explorer.simulation.movement import MovementMethod
from schelling_explorer.simulation.updater import AgentUpdater

logger = logging.getLogger(__name__)

__all__ = [
    "AgentUpdater",
    "BoundaryMode",
    "Parameters",
    "RunResult",
    "Ruleset",
    "SimulationDynamics",
    "UtilityEvaluator",
]

E = TypeVar("E", bound=Enum)


def _coerce_enum(enum_type: type[E], label: str, value: E | str) -> E:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type(value.lower())
        except ValueError:
            pass
    valid = ", ".join(member.value for member in enum_type)
    raise ValueError(f"{label} must be one of {valid}, got {value!r}")


def _check_fraction(label: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{label} must be in [0.0, 1.0], got {value}")
    return value


def _check_positive(label: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value:
        raise ValueError(f"{label} must be an integer, got {value!r}")
    value = int(value)
    if value < 1:
        raise ValueError(f"{label} must be >= 1, got {value}")
    return value


def _check_bool(label: str, value: bool) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{label} must be a bool, got {value!r}")
    return value


class Parameters:
    """Mutable configuration consumed by the engine at each run start."""

    _FIELDS = (
        "width",
        "height",
        "percent_empty",
        "boundary_mode",
        "search_radius",
        "search_limit",
        "move_chance",
        "maximum_steps",
        "shuffle_times",
        "stop_on_equilibrium",
        "dynamics",
        "utility_evaluator",
        "agent_updater",
    )

    _VALIDATORS: dict[str, Callable[[Any], Any]] = {
        "width": lambda v: _check_positive("width", v),
        "height": lambda v: _check_positive("height", v),
        "percent_empty": lambda v: _check_fraction("percent_empty", v),
        "boundary_mode": lambda v: _coerce_enum(BoundaryMode, "boundary_mode", v),
        "search_radius": lambda v: _check_positive("search_radius", v),
        "search_limit": lambda v: _check_positive("search_limit", v),
        "move_chance": lambda v: _check_fraction("move_chance", v),
        "maximum_steps": lambda v: _check_positive("maximum_steps", v),
        "shuffle_times": lambda v: _check_positive("shuffle_times", v),
        "stop_on_equilibrium": lambda v: _check_bool("stop_on_equilibrium", v),
        "dynamics": lambda v: _coerce_enum(SimulationDynamics, "dynamics", v),
        "utility_evaluator": lambda v: _coerce_enum(UtilityEvaluator, "utility_evaluator", v),
        "agent_updater": lambda v: _coerce_enum(AgentUpdater, "agent_updater", v),
    }

    def __init__(self) -> None:
        self._width = GRID_WIDTH
        self._height = GRID_HEIGHT
        self._percent_empty = PERCENT_EMPTY
        self._boundary_mode = BoundaryMode.TOROIDAL
        self._search_radius = SEARCH_RADIUS
        self._search_limit = SEARCH_LIMIT
        self._move_chance = MOVE_CHANCE
        self._maximum_steps = MAXIMUM_STEPS
        self._shuffle_times = SHUFFLE_TIMES
        self._stop_on_equilibrium = STOP_ON_EQUILIBRIUM
        self._dynamics = SimulationDynamics.LIQUID
        self._utility_evaluator = UtilityEvaluator.ABSOLUTE
        self._agent_updater = AgentUpdater.SINGLE

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._FIELDS)
        return f"Parameters({body})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameters):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def _validate(self, name: str, value: Any) -> Any:
        try:
            return self._VALIDATORS[name](value)
        except ValueError:
            logger.warning("Rejected %s=%r; keeping %r", name, value, getattr(self, name))
            raise

    def _assign(self, name: str, value: Any) -> None:
        setattr(self, f"_{name}", self._validate(name, value))

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self._assign("width", value)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self._assign("height", value)

    @property
    def percent_empty(self) -> float:
        """Fraction of cells left empty when the dynamics allow it."""
        return self._percent_empty

    @percent_empty.setter
    def percent_empty(self, value: float) -> None:
        self._assign("percent_empty", value)

    @property
    def boundary_mode(self) -> BoundaryMode:
        return self._boundary_mode

    @boundary_mode.setter
    def boundary_mode(self, value: BoundaryMode | str) -> None:
        self._assign("boundary_mode", value)

    @property
    def search_radius(self) -> int:
        return self._search_radius

    @search_radius.setter
    def search_radius(self, value: int) -> None:
        self._assign("search_radius", value)

    @property
    def search_limit(self) -> int:
        """Maximum number of empty cells sampled per relocation."""
        return self._search_limit

    @search_limit.setter
    def search_limit(self, value: int) -> None:
        self._assign("search_limit", value)

    @property
    def move_chance(self) -> float:
        """Probability that a happy agent queues for relocation (liquid only)."""
        return self._move_chance

    @move_chance.setter
    def move_chance(self, value: float) -> None:
        self._assign("move_chance", value)

    @property
    def maximum_steps(self) -> int:
        return self._maximum_steps

    @maximum_steps.setter
    def maximum_steps(self, value: int) -> None:
        self._assign("maximum_steps", value)

    @property
    def shuffle_times(self) -> int:
        return self._shuffle_times

    @shuffle_times.setter
    def shuffle_times(self, value: int) -> None:
        self._assign("shuffle_times", value)

    @property
    def stop_on_equilibrium(self) -> bool:
        return self._stop_on_equilibrium

    @stop_on_equilibrium.setter
    def stop_on_equilibrium(self, value: bool) -> None:
        self._assign("stop_on_equilibrium", value)

    @property
    def dynamics(self) -> SimulationDynamics:
        return self._dynamics

    @dynamics.setter
    def dynamics(self, value: SimulationDynamics | str) -> None:
        self._assign("dynamics", value)

    @property
    def utility_evaluator(self) -> UtilityEvaluator:
        return self._utility_evaluator

    @utility_evaluator.setter
    def utility_evaluator(self, value: UtilityEvaluator | str) -> None:
        self._assign("utility_evaluator", value)

    @property
    def agent_updater(self) -> AgentUpdater:
        return self._agent_updater

    @agent_updater.setter
    def agent_updater(self, value: AgentUpdater | str) -> None:
        self._assign("agent_updater", value)

    def update(self, values: Mapping[str, Any]) -> None:
        """Validate every key of ``values``, then apply them together.

        Unknown keys raise ``KeyError`` and rejected values raise
        ``ValueError``; either way no parameter changes.
        """
        unknown = sorted(set(values) - set(self._FIELDS))
        if unknown:
            raise KeyError(f"unknown parameter(s): {', '.join(unknown)}")
        staged = {
            name: self._validate(name, values[name]) for name in self._FIELDS if name in values
        }
        for name, checked in staged.items():
            setattr(self, f"_{name}", checked)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view with enum members replaced by their values."""
        result: dict[str, Any] = {}
        for name in self._FIELDS:
            value = getattr(self, name)
            result[name] = value.value if isinstance(value, Enum) else value
        return result


@dataclass(frozen=True)
class Ruleset:
    """Immutable per-run snapshot of the rules the engine applies."""

    boundary_mode: BoundaryMode = BoundaryMode.TOROIDAL
    search_radius: int = SEARCH_RADIUS
    search_limit: int = SEARCH_LIMIT
    movement_chance: float = MOVE_CHANCE
    dynamics: SimulationDynamics = SimulationDynamics.LIQUID
    utility_evaluator: UtilityEvaluator = UtilityEvaluator.ABSOLUTE
    agent_updater: AgentUpdater = AgentUpdater.SINGLE

    def __post_init__(self) -> None:
        if self.search_radius < 1:
            raise ValueError("search_radius must be >= 1")
        if self.search_limit < 1:
            raise ValueError("search_limit must be >= 1")
        if not 0.0 <= self.movement_chance <= 1.0:
            raise ValueError("movement_chance must be in [0.0, 1.0]")

    @property
    def movement_method(self) -> MovementMethod:
        return self.dynamics.movement_method

    @classmethod
    def from_parameters(cls, params: Parameters) -> Ruleset:
        if params is None:
            raise TypeError("params must not be None")
        return cls(
            boundary_mode=params.boundary_mode,
            search_radius=params.search_radius,
            search_limit=params.search_limit,
            movement_chance=params.move_chance,
            dynamics=params.dynamics,
            utility_evaluator=params.utility_evaluator,
            agent_updater=params.agent_updater,
        )


@dataclass(frozen=True)
class RunResult:
    """Outcome of one completed run."""

    seed: int
    steps: int
    stop_reason: str | None
    interface_density: float
    percent_unhappy: dict[str, float] = field(default_factory=dict)
