"""Tabulate and format a PlanResult for display or CSV export."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from .planner import PlanResult

PLAN_COLUMNS = [
    "instance",
    "art",
    "name",
    "main",
    "difficulty",
    "level",
    "zhenyuan",
    "time_hours",
]


def plan_to_dataframe(result: PlanResult) -> pd.DataFrame:
    """
    One row per instance with its chosen level and what that level yields.

    Zhenyuan is the absolute value at the chosen level; time_hours is the
    cumulative time to reach it from the minimum level.
    """
    rows: List[Dict[str, object]] = []
    for idx, inst in enumerate(result.instances):
        level = result.levels[inst.unique_id]
        by_level = {o.level: o for o in result.curves[idx]} if idx < len(result.curves) else {}
        option = by_level.get(level)
        rows.append({
            "instance": inst.unique_id,
            "art": inst.art_id,
            "name": inst.name,
            "main": inst.is_main,
            "difficulty": inst.difficulty,
            "level": level,
            "zhenyuan": option.zhenyuan if option else 0,
            "time_hours": option.time_hours if option else 0.0,
        })
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)


def summarize_by_art(df: pd.DataFrame) -> pd.DataFrame:
    """Aggregate a plan table per art: copies, level range, zhenyuan and hours."""
    if df.empty:
        return pd.DataFrame(
            columns=["art", "name", "copies", "min_level", "max_level", "zhenyuan", "time_hours"]
        )
    grouped = df.groupby("art", sort=False).agg(
        name=("name", "first"),
        copies=("instance", "count"),
        min_level=("level", "min"),
        max_level=("level", "max"),
        zhenyuan=("zhenyuan", "sum"),
        time_hours=("time_hours", "sum"),
    )
    return grouped.reset_index()


def write_plan_csv(df: pd.DataFrame, path: Path) -> None:
    """Write a plan table to CSV, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, float_format="%.4f")


def format_plan(result: PlanResult) -> str:
    """Human-readable plan for the command line."""
    lines = [
        f"Plan status: {result.status} (engine: {result.engine})",
        f"Total zhenyuan: {result.total_zhenyuan:,}",
        f"Total time: {result.total_time_hours:.2f} hours",
    ]
    if result.frontier_size:
        lines.append(f"Frontier states: {result.frontier_size}")

    df = plan_to_dataframe(result)
    if df.empty:
        lines.append("")
        lines.append("No arts to cultivate.")
        return "\n".join(lines)

    lines.append("")
    lines.append("Recommended levels:")
    for row in df.itertuples(index=False):
        role = "main" if row.main else "secondary"
        lines.append(
            f"  {row.instance} ({row.name}, {role}): level {row.level}, "
            f"{row.zhenyuan:,} zhenyuan, {row.time_hours:.2f}h"
        )
    return "\n".join(lines)
