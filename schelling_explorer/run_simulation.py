"""CLI entrypoint: run one segregation simulation and persist its metrics.

Supports ``--config path/to/config.json`` for reproducible runs.  CLI
arguments override config-file values; config-file values override built-in
defaults.  The config file may also list the groups to simulate::

    {"seed": 7, "dynamics": "solid",
     "groups": [{"name": "A", "population": 0.6, "tolerance": 0.4},
                {"name": "B", "population": 0.4, "tolerance": 0.5}]}

Without a ``groups`` entry the two-group default model is used.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

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
from schelling_explorer.config.types import (
    AgentUpdater,
    BoundaryMode,
    RunResult,
    SimulationDynamics,
    UtilityEvaluator,
)
from schelling_explorer.io.paths import (
    run_summary_json_path,
    run_summary_parquet_path,
    tick_metrics_path,
)
from schelling_explorer.io.persistence import TickMetricsRecorder, write_run_summary
from schelling_explorer.metrics.population import percent_unhappy
from schelling_explorer.metrics.spatial import interface_density
from schelling_explorer.simulation.engine import SchellingModel
from schelling_explorer.simulation.factory import create_two_group_model, groups_from_config

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    """Coerce raw value to bool with strict string-check."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_bool(cli_val: bool | None, key: str, file_cfg: dict[str, object], default: bool) -> bool:
    return _coerce_bool(_get_val(cli_val, key, file_cfg, default), key)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _json_safe(value: float) -> float | None:
    """Replace NaN with ``None`` so the summary stays strict JSON."""
    return None if math.isnan(value) else value


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run a Schelling segregation simulation")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--percent-empty", type=float, default=None)
    parser.add_argument(
        "--boundary",
        type=str,
        choices=[mode.value for mode in BoundaryMode],
        default=None,
    )
    parser.add_argument("--search-radius", type=int, default=None)
    parser.add_argument("--search-limit", type=int, default=None)
    parser.add_argument("--move-chance", type=float, default=None)
    parser.add_argument("--max-steps", type=int, default=None)
    parser.add_argument("--shuffle-times", type=int, default=None)
    parser.add_argument(
        "--stop-on-equilibrium", action=argparse.BooleanOptionalAction, default=None
    )
    parser.add_argument(
        "--dynamics",
        type=str,
        choices=[dynamics.value for dynamics in SimulationDynamics],
        default=None,
    )
    parser.add_argument(
        "--utility",
        type=str,
        choices=[evaluator.value for evaluator in UtilityEvaluator],
        default=None,
    )
    parser.add_argument(
        "--updater",
        type=str,
        choices=[updater.value for updater in AgentUpdater],
        default=None,
    )
    parser.add_argument(
        "--check-invariants",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Verify engine bookkeeping after every tick (slow)",
    )
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
    )
    return parser


def _build_model(
    seed: int, width: int, height: int, file_cfg: dict[str, object]
) -> SchellingModel:
    raw_groups = file_cfg.get("groups")
    if raw_groups is None:
        return create_two_group_model(seed, width=width, height=height)
    if not isinstance(raw_groups, list):
        raise ValueError("groups must be a list of group objects")
    model = SchellingModel(seed, width=width, height=height)
    for group in groups_from_config(raw_groups):
        model.add_group(group)
    return model


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for a single simulation run."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    log_level = _get_str(args.log_level, "log_level", file_cfg, "WARNING")
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        seed = _get_int(args.seed, "seed", file_cfg, 0)
        width = _get_int(args.width, "width", file_cfg, GRID_WIDTH)
        height = _get_int(args.height, "height", file_cfg, GRID_HEIGHT)
        out_dir = Path(_get_str(args.out_dir, "out_dir", file_cfg, "data/schelling"))
        check_invariants = _get_bool(args.check_invariants, "check_invariants", file_cfg, False)

        model = _build_model(seed, width, height, file_cfg)
        model.check_invariants_each_tick = check_invariants
        model.parameters.update(
            {
                "percent_empty": _get_float(
                    args.percent_empty, "percent_empty", file_cfg, PERCENT_EMPTY
                ),
                "boundary_mode": _get_str(
                    args.boundary, "boundary_mode", file_cfg, BoundaryMode.TOROIDAL.value
                ),
                "search_radius": _get_int(
                    args.search_radius, "search_radius", file_cfg, SEARCH_RADIUS
                ),
                "search_limit": _get_int(
                    args.search_limit, "search_limit", file_cfg, SEARCH_LIMIT
                ),
                "move_chance": _get_float(args.move_chance, "move_chance", file_cfg, MOVE_CHANCE),
                "maximum_steps": _get_int(
                    args.max_steps, "maximum_steps", file_cfg, MAXIMUM_STEPS
                ),
                "shuffle_times": _get_int(
                    args.shuffle_times, "shuffle_times", file_cfg, SHUFFLE_TIMES
                ),
                "stop_on_equilibrium": _get_bool(
                    args.stop_on_equilibrium, "stop_on_equilibrium", file_cfg, STOP_ON_EQUILIBRIUM
                ),
                "dynamics": _get_str(
                    args.dynamics, "dynamics", file_cfg, SimulationDynamics.LIQUID.value
                ),
                "utility_evaluator": _get_str(
                    args.utility, "utility_evaluator", file_cfg, UtilityEvaluator.ABSOLUTE.value
                ),
                "agent_updater": _get_str(
                    args.updater, "agent_updater", file_cfg, AgentUpdater.SINGLE.value
                ),
            }
        )
    except (KeyError, ValueError) as exc:
        message = exc.args[0] if exc.args else exc
        parser.error(f"Invalid configuration: {message}")

    run_id = f"seed-{seed}"
    recorder = TickMetricsRecorder(tick_metrics_path(out_dir), run_id)
    model.add_statistics_observer(recorder)
    model.start()
    try:
        model.run()
    finally:
        recorder.close()

    ruleset = model.ruleset
    unhappy = percent_unhappy(model)
    result = RunResult(
        seed=seed,
        steps=model.steps,
        stop_reason=model.stop_reason.value if model.stop_reason is not None else None,
        interface_density=interface_density(
            model.grid.cells, ruleset.search_radius, ruleset.boundary_mode
        ),
        percent_unhappy={group.name: unhappy[group.group_id] for group in model.groups},
    )
    write_run_summary(result, run_id, run_summary_parquet_path(out_dir))

    summary = {
        "run_id": run_id,
        "seed": result.seed,
        "steps": result.steps,
        "stop_reason": result.stop_reason,
        "agents": len(model.agents),
        "empty_cells": len(model.empty_cells),
        "interface_density": _json_safe(result.interface_density),
        "percent_unhappy": {
            name: _json_safe(value) for name, value in result.percent_unhappy.items()
        },
        "parameters": model.parameters.to_dict(),
        "tick_metrics_rows": recorder.rows_written,
    }
    out_dir.mkdir(parents=True, exist_ok=True)
    run_summary_json_path(out_dir).write_text(json.dumps(summary, ensure_ascii=False, indent=2))
    logger.info("Run summary written to %s", run_summary_json_path(out_dir))
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
