"""Path construction helpers for run output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def tick_metrics_path(out_dir: Path) -> Path:
    """Return path to the per-tick metrics Parquet file."""
    return logs_dir(out_dir) / "tick_metrics.parquet"


def run_summary_parquet_path(out_dir: Path) -> Path:
    return logs_dir(out_dir) / "run_summary.parquet"


def run_summary_json_path(out_dir: Path) -> Path:
    return out_dir / "run_summary.json"
