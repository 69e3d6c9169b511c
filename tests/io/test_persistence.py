"""Tests for schelling_explorer.io.persistence."""

from __future__ import annotations

import math
from collections.abc import Callable
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from schelling_explorer.config.types import RunResult
from schelling_explorer.io.paths import tick_metrics_path
from schelling_explorer.io.persistence import (
    TickMetricsRecorder,
    empty_metric_columns,
    flush_metric_columns,
    write_run_summary,
)
from schelling_explorer.io.schemas import RUN_SUMMARY_SCHEMA, TICK_METRICS_SCHEMA
from schelling_explorer.simulation.engine import SchellingModel

ModelFactory = Callable[..., SchellingModel]


class TestTickMetricsRecorder:
    def test_writes_one_row_per_group_per_tick(
        self, tmp_path: Path, make_model: ModelFactory
    ) -> None:
        model = make_model(maximum_steps=4)
        path = tick_metrics_path(tmp_path)
        with TickMetricsRecorder(path, "run-1") as recorder:
            model.add_statistics_observer(recorder)
            model.start()
            model.run()
        table = pq.read_table(path)
        assert set(table.column_names) == set(TICK_METRICS_SCHEMA.names)
        assert table.num_rows == 8
        assert sorted(set(table.column("step").to_pylist())) == [1, 2, 3, 4]
        assert set(table.column("group_name").to_pylist()) == {"G0", "G1"}
        assert set(table.column("run_id").to_pylist()) == {"run-1"}
        assert recorder.rows_written == 8

    def test_small_flush_threshold_keeps_every_row(
        self, tmp_path: Path, make_model: ModelFactory
    ) -> None:
        model = make_model(maximum_steps=5)
        path = tmp_path / "metrics.parquet"
        recorder = TickMetricsRecorder(path, "run-2", flush_threshold=3)
        model.add_statistics_observer(recorder)
        model.start()
        model.run()
        recorder.close()
        assert pq.read_table(path).num_rows == 10

    def test_interface_density_repeats_within_a_tick(
        self, tmp_path: Path, make_model: ModelFactory
    ) -> None:
        model = make_model(maximum_steps=1)
        path = tmp_path / "metrics.parquet"
        with TickMetricsRecorder(path, "run-3") as recorder:
            model.add_statistics_observer(recorder)
            model.start()
            model.run()
        densities = pq.read_table(path).column("interface_density").to_pylist()
        assert len(densities) == 2
        assert densities[0] == densities[1]
        assert 0.0 <= densities[0] <= 1.0

    def test_no_rows_means_no_file(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.parquet"
        TickMetricsRecorder(path, "run-4").close()
        assert not path.exists()

    def test_record_after_close(self, tmp_path: Path, make_model: ModelFactory) -> None:
        model = make_model()
        model.start()
        recorder = TickMetricsRecorder(tmp_path / "m.parquet", "run-5")
        recorder.close()
        with pytest.raises(RuntimeError):
            recorder.record(model)

    def test_invalid_flush_threshold(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            TickMetricsRecorder(tmp_path / "m.parquet", "run-6", flush_threshold=0)


def test_flush_without_rows_returns_writer_unchanged(tmp_path: Path) -> None:
    columns = empty_metric_columns()
    assert flush_metric_columns(columns, tmp_path / "m.parquet", None) is None
    assert not (tmp_path / "m.parquet").exists()


def test_flush_clears_buffers(tmp_path: Path) -> None:
    columns = empty_metric_columns()
    columns["run_id"].append("r")
    columns["step"].append(1)
    columns["group_id"].append(0)
    columns["group_name"].append("A")
    columns["percent_unhappy"].append(float("nan"))
    columns["interface_density"].append(0.25)
    writer = flush_metric_columns(columns, tmp_path / "m.parquet", None)
    assert writer is not None
    writer.close()
    assert all(not values for values in columns.values())
    table = pq.read_table(tmp_path / "m.parquet")
    assert math.isnan(table.column("percent_unhappy")[0].as_py())


def test_write_run_summary(tmp_path: Path) -> None:
    result = RunResult(seed=3, steps=12, stop_reason="equilibrium", interface_density=0.4)
    path = tmp_path / "logs" / "run_summary.parquet"
    write_run_summary(result, "seed-3", path)
    table = pq.read_table(path)
    assert table.schema.equals(RUN_SUMMARY_SCHEMA)
    assert table.to_pylist() == [
        {
            "run_id": "seed-3",
            "seed": 3,
            "steps": 12,
            "stop_reason": "equilibrium",
            "interface_density": 0.4,
        }
    ]
