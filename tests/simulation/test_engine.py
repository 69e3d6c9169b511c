"""Tests for schelling_explorer.simulation.engine."""

from __future__ import annotations

from collections.abc import Callable
from random import Random

import numpy as np
import pytest

from schelling_explorer.config.constants import EMPTY_CELL
from schelling_explorer.domain.grid import Grid
from schelling_explorer.domain.group import Group
from schelling_explorer.simulation.engine import (
    SchellingModel,
    SimulationInvariantError,
    shuffle_grid,
)
from schelling_explorer.simulation.tasks import StopReason

ModelFactory = Callable[..., SchellingModel]


class _RecordingRandom(Random):
    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.bounds: list[int] = []

    def randrange(self, *args, **kwargs):  # type: ignore[no-untyped-def, override]
        self.bounds.append(args[0])
        return super().randrange(*args, **kwargs)


def _numbered_grid(width: int, height: int) -> Grid:
    grid = Grid(width, height)
    for x in range(width):
        for y in range(height):
            grid.set(x, y, x * height + y)
    return grid


class TestShuffleGrid:
    def test_draw_bounds_follow_nested_loops(self) -> None:
        rng = _RecordingRandom(0)
        shuffle_grid(_numbered_grid(3, 3), rng)
        assert rng.bounds == [3, 3, 3, 2, 2, 3, 2, 2]

    def test_is_a_permutation(self) -> None:
        grid = _numbered_grid(6, 4)
        shuffle_grid(grid, Random(9))
        assert sorted(grid.cells.ravel().tolist()) == list(range(24))

    def test_same_seed_is_bit_identical(self) -> None:
        first, second = _numbered_grid(7, 5), _numbered_grid(7, 5)
        rng_first, rng_second = Random(42), Random(42)
        for _ in range(4):
            shuffle_grid(first, rng_first)
            shuffle_grid(second, rng_second)
        np.testing.assert_array_equal(first.cells, second.cells)

    def test_single_row_grid_draws_nothing(self) -> None:
        rng = _RecordingRandom(0)
        shuffle_grid(_numbered_grid(5, 1), rng)
        assert rng.bounds == []


class TestGroupRegistry:
    def test_duplicate_group_id_rejected(self, group_a: Group) -> None:
        model = SchellingModel(0, width=5, height=5)
        model.add_group(group_a)
        with pytest.raises(ValueError):
            model.add_group(Group("other", group_a.group_id))

    def test_lookups(self, group_a: Group, group_b: Group) -> None:
        model = SchellingModel(0, width=5, height=5)
        model.add_group(group_a)
        model.add_group(group_b)
        assert model.group(1) is group_b
        assert model.group_by_name("A") is group_a
        with pytest.raises(KeyError):
            model.group_by_name("missing")

    def test_remove_group(self, group_a: Group, group_b: Group) -> None:
        model = SchellingModel(0, width=5, height=5)
        model.add_group(group_a)
        model.remove_group(group_a)
        assert model.groups == []
        with pytest.raises(KeyError):
            model.remove_group(group_b)

    def test_none_is_rejected(self) -> None:
        model = SchellingModel(0, width=5, height=5)
        with pytest.raises(TypeError):
            model.add_group(None)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            model.add_statistics_observer(None)  # type: ignore[arg-type]


class TestStart:
    def test_requires_groups(self) -> None:
        with pytest.raises(ValueError):
            SchellingModel(0, width=5, height=5).start()

    def test_step_before_start(self, make_model: ModelFactory) -> None:
        with pytest.raises(RuntimeError):
            make_model().step()

    def test_liquid_population(self, make_model: ModelFactory) -> None:
        model = make_model(percent_empty=0.02)
        model.start()
        assert len(model.empty_cells) == 2
        assert len(model.agents) == 98
        assert model.group_totals == {0: 49, 1: 49}
        assert model.grid.count(EMPTY_CELL) == 2
        model.check_invariants()

    def test_swap_ignores_percent_empty(self, make_model: ModelFactory) -> None:
        model = make_model(percent_empty=0.5, dynamics="swap")
        model.start()
        assert model.empty_cells == []
        assert len(model.agents) == 100

    def test_grid_follows_parameter_size(self, make_model: ModelFactory) -> None:
        model = make_model()
        model.parameters.update({"width": 6, "height": 4})
        model.start()
        assert (model.grid.width, model.grid.height) == (6, 4)
        assert len(model.agents) + len(model.empty_cells) == 24

    def test_same_seed_reproduces_run(self, make_model: ModelFactory) -> None:
        snapshots = []
        for _ in range(2):
            model = make_model(seed=17, percent_empty=0.1)
            model.start()
            model.run(max_ticks=10)
            snapshots.append(model.snapshot())
        np.testing.assert_array_equal(snapshots[0], snapshots[1])

    def test_different_seed_changes_layout(self, make_model: ModelFactory) -> None:
        first, second = make_model(seed=1), make_model(seed=2)
        first.start()
        second.start()
        assert not np.array_equal(first.snapshot(), second.snapshot())

    def test_start_with_seed_reseeds(self, make_model: ModelFactory) -> None:
        reseeded = make_model(seed=1)
        reseeded.start()
        reseeded.run(max_ticks=3)
        reseeded.start(seed=8)
        fresh = make_model(seed=8)
        fresh.start()
        np.testing.assert_array_equal(reseeded.snapshot(), fresh.snapshot())

    def test_restart_resets_run_state(self, make_model: ModelFactory) -> None:
        model = make_model(maximum_steps=2)
        model.start()
        model.run()
        assert model.finished
        model.start()
        assert not model.finished
        assert model.steps == 0
        assert model.stop_reason is None


class TestLifecycle:
    def test_finish_is_idempotent(self, make_model: ModelFactory) -> None:
        model = make_model()
        model.start()
        model.finish()
        model.finish(StopReason.MAXIMUM_STEPS)
        assert model.stop_reason is StopReason.FINISHED
        assert model.step() is False

    def test_run_honours_max_ticks(self, make_model: ModelFactory) -> None:
        model = make_model()
        model.start()
        assert model.run(max_ticks=5) == 5
        assert model.steps == 5
        assert not model.finished

    def test_invariant_violation_aborts_run(self, make_model: ModelFactory) -> None:
        model = make_model(dynamics="solid")
        model.check_invariants_each_tick = True
        model.start()
        model.agents[1].set_location(*model.agents[0].location)
        with pytest.raises(SimulationInvariantError):
            model.step()
        assert model.finished
        assert model.stop_reason is StopReason.INVARIANT_VIOLATION

    def test_invariants_hold_over_a_liquid_run(self, make_model: ModelFactory) -> None:
        model = make_model(seed=5, percent_empty=0.1, agent_updater="batch")
        model.check_invariants_each_tick = True
        model.start()
        model.run(max_ticks=25)


class TestSwapScenario:
    def test_two_groups_full_grid(self, make_model: ModelFactory) -> None:
        model = make_model(
            seed=21,
            percent_empty=0.0,
            dynamics="swap",
            tolerance=0.5,
            agent_updater="batch",
            maximum_steps=30,
        )
        queued: list[int] = []

        def _observe(m: SchellingModel) -> None:
            assert m.grid.count(EMPTY_CELL) == 0
            queued.append(len(m.move_list))

        model.add_statistics_observer(_observe)
        model.check_invariants_each_tick = True
        relocations: list[int] = []
        model.start()
        while model.step():
            relocations.append(model.last_relocations)
        relocations.append(model.last_relocations)
        # Each tick's Movement phase consumes the previous tick's queue in pairs.
        assert relocations[0] == 0
        assert relocations[1:] == [size // 2 for size in queued[:-1]]

    def test_single_updater_moves_one_pair_per_tick(self, make_model: ModelFactory) -> None:
        model = make_model(seed=4, dynamics="swap", maximum_steps=15)
        model.start()
        while model.step():
            assert model.last_relocations <= 1
        assert model.grid.count(EMPTY_CELL) == 0
