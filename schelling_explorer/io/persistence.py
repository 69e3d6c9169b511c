"""Parquet persistence for the per-tick metric log and run summaries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.parquet as pq

from schelling_explorer.config.constants import FLUSH_THRESHOLD
from schelling_explorer.config.types import RunResult
from schelling_explorer.io.schemas import RUN_SUMMARY_SCHEMA, TICK_METRICS_SCHEMA
from schelling_explorer.metrics.population import percent_unhappy
from schelling_explorer.metrics.spatial import interface_density

if TYPE_CHECKING:
    from schelling_explorer.simulation.engine import SchellingModel

logger = logging.getLogger(__name__)


def empty_metric_columns() -> dict[str, list[int | str | float]]:
    return {name: [] for name in TICK_METRICS_SCHEMA.names}


def flush_metric_columns(
    metric_columns: dict[str, list[int | str | float]],
    metrics_path: Path,
    metric_writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated metric rows to Parquet and clear in-memory buffers."""
    if not metric_columns["run_id"]:
        return metric_writer
    table = pa.Table.from_pydict(metric_columns, schema=TICK_METRICS_SCHEMA)
    if metric_writer is None:
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metric_writer = pq.ParquetWriter(metrics_path, TICK_METRICS_SCHEMA)
    metric_writer.write_table(table)
    for values in metric_columns.values():
        values.clear()
    return metric_writer


class TickMetricsRecorder:
    """Statistics observer that streams one row per group per tick to Parquet.

    Rows are buffered and flushed every ``flush_threshold`` rows; ``close``
    flushes the remainder and closes the file.  Only metrics are persisted,
    never the grid itself.
    """

    def __init__(
        self,
        metrics_path: Path,
        run_id: str,
        flush_threshold: int = FLUSH_THRESHOLD,
    ) -> None:
        if flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
        self.metrics_path = Path(metrics_path)
        self.run_id = run_id
        self.flush_threshold = flush_threshold
        self.rows_written = 0
        self._columns = empty_metric_columns()
        self._writer: pq.ParquetWriter | None = None
        self._closed = False

    def __call__(self, model: SchellingModel) -> None:
        self.record(model)

    def __enter__(self) -> TickMetricsRecorder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def record(self, model: SchellingModel) -> None:
        if self._closed:
            raise RuntimeError("recorder is closed")
        ruleset = model.ruleset
        density = interface_density(model.grid.cells, ruleset.search_radius, ruleset.boundary_mode)
        unhappy = percent_unhappy(model)
        step = model.steps + 1
        for group in model.groups:
            self._columns["run_id"].append(self.run_id)
            self._columns["step"].append(step)
            self._columns["group_id"].append(group.group_id)
            self._columns["group_name"].append(group.name)
            self._columns["percent_unhappy"].append(unhappy[group.group_id])
            self._columns["interface_density"].append(density)
        if len(self._columns["run_id"]) >= self.flush_threshold:
            self._flush()

    def _flush(self) -> None:
        pending = len(self._columns["run_id"])
        self._writer = flush_metric_columns(self._columns, self.metrics_path, self._writer)
        self.rows_written += pending

    def close(self) -> None:
        if self._closed:
            return
        self._flush()
        if self._writer is not None:
            self._writer.close()
            self._writer = None
        self._closed = True
        logger.info("Wrote %d metric rows to %s", self.rows_written, self.metrics_path)


def write_run_summary(result: RunResult, run_id: str, path: Path) -> None:
    """Write ``result`` as a single-row Parquet table."""
    table = pa.Table.from_pydict(
        {
            "run_id": [run_id],
            "seed": [result.seed],
            "steps": [result.steps],
            "stop_reason": [result.stop_reason],
            "interface_density": [result.interface_density],
        },
        schema=RUN_SUMMARY_SCHEMA,
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table, path)
