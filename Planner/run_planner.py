#!/usr/bin/env python
"""CLI entry point for the cultivation planner."""
from __future__ import annotations

import argparse
import cProfile
import pstats
import sys
from dataclasses import replace
from io import StringIO
from pathlib import Path

from .config import ENGINES, ObjectiveMode, PlannerConfig, load_config
from .planner import optimize_config
from .report import format_plan, plan_to_dataframe, summarize_by_art, write_plan_csv
from .solver_logging import LogLevel


def apply_overrides(config: PlannerConfig, args: argparse.Namespace) -> PlannerConfig:
    """Return a copy of ``config`` with command-line overrides applied."""
    settings = config.settings
    if args.target_type is not None:
        settings = replace(settings, target_type=ObjectiveMode(args.target_type))
    if args.target_value is not None:
        settings = replace(settings, target_value=args.target_value)
    if args.speed is not None:
        if args.speed <= 0:
            raise ValueError(f"--speed must be positive, got {args.speed}")
        settings = replace(settings, speed=args.speed)
    if args.reduction is not None:
        if not 0 <= args.reduction <= 100:
            raise ValueError(f"--reduction must be within 0-100, got {args.reduction}")
        settings = replace(settings, breakthrough_reduction=args.reduction)

    search = config.search
    if args.engine is not None:
        search = replace(search, engine=args.engine)
    if args.bucket_size is not None:
        search = replace(search, bucket_size=max(0, args.bucket_size))

    return PlannerConfig(arts=list(config.arts), settings=settings, search=search)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Plan cultivation art levels for a zhenyuan target or a time budget."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to planner config YAML (default: Planner/DefaultPlannerConfig.yaml)",
    )
    parser.add_argument(
        "--target-type",
        choices=[m.value for m in ObjectiveMode],
        default=None,
        help="zhenyuan: reach targetValue fastest; time: most zhenyuan within targetValue hours",
    )
    parser.add_argument("--target-value", type=float, default=None, help="Zhenyuan floor or hour budget")
    parser.add_argument("--speed", type=float, default=None, help="Cultivation value per hour")
    parser.add_argument("--reduction", type=float, default=None,
                        help="Breakthrough time reduction in percent (0-100)")
    parser.add_argument("--engine", choices=ENGINES, default=None,
                        help="frontier: bucketed Pareto merge; milp: exact PuLP model")
    parser.add_argument("--bucket-size", type=int, default=None,
                        help="Zhenyuan bucket width for the frontier engine (0 = exact)")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show planner progress (SUMMARY logging)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=[lvl.name for lvl in LogLevel],
        help="Planner log verbosity (overrides --verbose)",
    )
    parser.add_argument("--table-out", type=Path, default=None,
                        help="Optional CSV path for the per-instance plan table")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run with cProfile and display performance statistics",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="cumulative",
        choices=["cumulative", "time", "calls", "name"],
        help="Sort order for profile output (default: cumulative)",
    )
    parser.add_argument(
        "--profile-lines",
        type=int,
        default=30,
        help="Number of profile lines to display (default: 30)",
    )

    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        result = optimize_config(config, log_level=args.log_level, verbose=args.verbose)
        profiler.disable()

        print("\n" + "=" * 60)
        print("PROFILING RESULTS")
        print("=" * 60)

        stream = StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.strip_dirs()
        stats.sort_stats(args.profile_sort)
        stats.print_stats(args.profile_lines)
        print(stream.getvalue())

        print(f"\nTotal function calls: {stats.total_calls}")
        print(f"Total time: {stats.total_tt:.3f} seconds")
        print("=" * 60 + "\n")
    else:
        result = optimize_config(config, log_level=args.log_level, verbose=args.verbose)

    if result is None:
        print("No plan found.")
        return 1

    settings = config.settings
    unit = "zhenyuan" if settings.target_type == ObjectiveMode.ZHENYUAN else "hours"
    print(f"Objective: {settings.target_type.value} (target {settings.target_value:g} {unit})")
    print(format_plan(result))

    df = plan_to_dataframe(result)
    if not df.empty and df["art"].duplicated().any():
        print()
        print("Per art:")
        print(summarize_by_art(df).to_string(index=False))

    if args.table_out:
        write_plan_csv(df, args.table_out)
        print()
        print(f"Plan table written to {args.table_out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
