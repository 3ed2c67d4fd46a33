"""Expand art specs into instances and precompute their level option curves."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .config import MAX_LEVEL, MIN_LEVEL, ArtSpec
from .formulas import LEVEL_STEP, step_cost, zhenyuan_at


@dataclass(frozen=True)
class ArtInstance:
    """One independently levelled copy of an art."""

    unique_id: str  # "<art id>_<replica index>"
    art_id: str
    name: str
    difficulty: float
    is_main: bool


@dataclass(frozen=True)
class LevelOption:
    """A checkpoint an instance may stop at."""

    level: int
    zhenyuan: int  # absolute zhenyuan at this level
    time_hours: float  # cumulative hours from the minimum level


def expand_instances(arts: Sequence[ArtSpec]) -> List[ArtInstance]:
    """
    Flatten art specs into instances, one per copy.

    An art with ``count == k`` yields ``k`` instances with ids
    ``"<id>_0"`` .. ``"<id>_<k-1>"``, in input order.
    """
    instances: List[ArtInstance] = []
    for art in arts:
        for replica in range(art.count):
            instances.append(
                ArtInstance(
                    unique_id=f"{art.id}_{replica}",
                    art_id=art.id,
                    name=art.display_name,
                    difficulty=art.difficulty,
                    is_main=art.is_main,
                )
            )
    return instances


def level_grid(min_level: int = MIN_LEVEL, max_level: int = MAX_LEVEL) -> List[int]:
    """Checkpoint levels from ``min_level`` to ``max_level`` inclusive, every 10 levels."""
    return list(range(min_level, max_level + 1, LEVEL_STEP))


def build_option_curve(
    instance: ArtInstance,
    speed: float,
    breakthrough_reduction: float,
    min_level: int = MIN_LEVEL,
    max_level: int = MAX_LEVEL,
) -> List[LevelOption]:
    """
    Build the ordered checkpoint options for one instance.

    The first option is the baseline: minimum level, zero time. Each later
    option adds the cost of the 10-level span that leads to it, so times are
    cumulative from the minimum level.
    """
    grid = level_grid(min_level, max_level)
    options = [
        LevelOption(
            level=grid[0],
            zhenyuan=zhenyuan_at(grid[0], instance.difficulty, instance.is_main),
            time_hours=0.0,
        )
    ]

    cumulative = 0.0
    for start, level in zip(grid, grid[1:]):
        cumulative += step_cost(start, instance.difficulty, speed, breakthrough_reduction)
        options.append(
            LevelOption(
                level=level,
                zhenyuan=zhenyuan_at(level, instance.difficulty, instance.is_main),
                time_hours=cumulative,
            )
        )
    return options


def build_option_curves(
    instances: Sequence[ArtInstance],
    speed: float,
    breakthrough_reduction: float,
    min_level: int = MIN_LEVEL,
    max_level: int = MAX_LEVEL,
) -> List[List[LevelOption]]:
    """Build option curves for every instance, aligned with ``instances``."""
    return [
        build_option_curve(inst, speed, breakthrough_reduction, min_level, max_level)
        for inst in instances
    ]


def baseline_zhenyuan(curves: Sequence[Sequence[LevelOption]]) -> int:
    """Total zhenyuan with every instance at its minimum level."""
    return sum(options[0].zhenyuan for options in curves)
