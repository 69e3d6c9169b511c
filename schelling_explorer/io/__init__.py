"""Parquet schemas, output paths, and metric persistence."""

from schelling_explorer.io.paths import (
    logs_dir,
    run_summary_json_path,
    run_summary_parquet_path,
    tick_metrics_path,
)
from schelling_explorer.io.persistence import (
    TickMetricsRecorder,
    flush_metric_columns,
    write_run_summary,
)
from schelling_explorer.io.schemas import RUN_SUMMARY_SCHEMA, TICK_METRICS_SCHEMA

__all__ = [
    "RUN_SUMMARY_SCHEMA",
    "TICK_METRICS_SCHEMA",
    "TickMetricsRecorder",
    "flush_metric_columns",
    "logs_dir",
    "run_summary_json_path",
    "run_summary_parquet_path",
    "tick_metrics_path",
    "write_run_summary",
]
