"""Parquet schema definitions for simulation artifacts.

Every Arrow schema the package writes lives here so the recorder and its
readers agree on one column contract.
"""

from __future__ import annotations

import pyarrow as pa

TICK_METRICS_SCHEMA_VERSION = 1

TICK_METRICS_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("step", pa.int64()),
        ("group_id", pa.int64()),
        ("group_name", pa.string()),
        ("percent_unhappy", pa.float64()),
        ("interface_density", pa.float64()),
    ],
    metadata={"schema_version": str(TICK_METRICS_SCHEMA_VERSION)},
)

RUN_SUMMARY_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("seed", pa.int64()),
        ("steps", pa.int64()),
        ("stop_reason", pa.string()),
        ("interface_density", pa.float64()),
    ]
)
