"""Game formulas for cultivation cost, zhenyuan and breakthrough time.

Pure, stateless functions. The optimizer treats them as black boxes and only
relies on zhenyuan and cumulative cost being strictly increasing in level
for a fixed difficulty.
"""
from __future__ import annotations

import math

# Levels per checkpoint span (a breakthrough gates each span)
LEVEL_STEP = 10

# Breakthrough bands: (first start level, last start level, base hours)
BREAKTHROUGH_BANDS = (
    (99, 289, 2.0),
    (299, 389, 4.0),
)
LATE_BREAKTHROUGH_START = 399
LATE_BREAKTHROUGH_HOURS = 8.0

ZHENYUAN_DIVISOR = 10127
SECONDARY_ART_FACTOR = 0.5


def difficulty_modifier(level: int) -> float:
    """Slope multiplier on the per-level cost: 1 below 309, ramps to 2 by 400."""
    if level < 309:
        return 1.0
    if level < 400:
        return (9 * level - 1811) / 890
    return 2.0


def level_up_cost_value(level: int, difficulty: float) -> float:
    """Cultivation value needed to go from ``level`` to ``level + 1``."""
    return difficulty * (level ** 3 + 1000) / 100 * difficulty_modifier(level)


def zhenyuan_at(level: int, difficulty: float, is_main: bool) -> int:
    """
    Total zhenyuan granted by an art at ``level``.

    Secondary arts contribute half. The result is floored to an integer.
    """
    raw = 3 * level ** 3 * difficulty / ZHENYUAN_DIVISOR
    factor = 1.0 if is_main else SECONDARY_ART_FACTOR
    return math.floor(raw * factor)


def breakthrough_time(start_level: int, reduction_percent: float) -> float:
    """Hours of breakthrough needed before cultivating past ``start_level``."""
    base_hours = 0.0
    for low, high, hours in BREAKTHROUGH_BANDS:
        if low <= start_level <= high:
            base_hours = hours
            break
    else:
        if start_level >= LATE_BREAKTHROUGH_START:
            base_hours = LATE_BREAKTHROUGH_HOURS
    return base_hours * (1 - reduction_percent / 100)


def step_cost(
    start_level: int,
    difficulty: float,
    speed: float,
    reduction_percent: float,
) -> float:
    """
    Hours to advance an art from ``start_level`` to ``start_level + 10``.

    Parameters
    ----------
    start_level : int
        Level the span starts from (a breakthrough level, e.g. 99, 109, ...)
    difficulty : float
        Difficulty rating of the art
    speed : float
        Cultivation value gained per hour
    reduction_percent : float
        Breakthrough time reduction in percent (0-100)

    Returns
    -------
    float
        Breakthrough hours plus cultivation hours for the ten level-ups
    """
    cultivation_value = 0.0
    for level in range(start_level, start_level + LEVEL_STEP):
        cultivation_value += level_up_cost_value(level, difficulty)
    return breakthrough_time(start_level, reduction_percent) + cultivation_value / speed
