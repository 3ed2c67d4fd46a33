"""
Pareto-frontier merge over (zhenyuan, time) for one-option-per-instance plans.

The frontier is folded one instance at a time. After each step it holds the
non-dominated (zhenyuan delta, total time) combinations of the instances seen
so far, sorted by zhenyuan descending with time strictly decreasing along the
list. Optional bucketing keeps at most one state per ``bucket_size`` wide
zhenyuan range, which bounds the frontier size at the cost of dropping some
efficient states.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .art_data import LevelOption
from .config import BUCKET_SIZE
from .solver_logging import LogLevel, PlannerLogger

Frontier = List["FrontierState"]


@dataclass(frozen=True)
class FrontierState:
    """A partial plan: zhenyuan over the baseline, total hours, level per instance."""

    zhenyuan: int
    time_hours: float
    choices: Tuple[int, ...]

    def extend(self, index: int, option: LevelOption, base_zhenyuan: int) -> "FrontierState":
        """Return a new state with instance ``index`` set to ``option``."""
        choices = self.choices[:index] + (option.level,) + self.choices[index + 1:]
        return FrontierState(
            zhenyuan=self.zhenyuan + option.zhenyuan - base_zhenyuan,
            time_hours=self.time_hours + option.time_hours,
            choices=choices,
        )


def initial_frontier(curves: Sequence[Sequence[LevelOption]]) -> Frontier:
    """Single baseline state: every instance at its first option, no time spent."""
    return [
        FrontierState(
            zhenyuan=0,
            time_hours=0.0,
            choices=tuple(options[0].level for options in curves),
        )
    ]


def expand_frontier(frontier: Frontier, index: int, options: Sequence[LevelOption]) -> Frontier:
    """Cross every frontier state with every option of instance ``index``."""
    base_zhenyuan = options[0].zhenyuan
    return [state.extend(index, opt, base_zhenyuan) for state in frontier for opt in options]


def pareto_filter(candidates: Frontier) -> Frontier:
    """
    Keep the non-dominated candidates, sorted by zhenyuan descending.

    Equal zhenyuan is ordered by time so only the fastest of them survives;
    full ties keep generation order.
    """
    ordered = sorted(candidates, key=lambda s: (-s.zhenyuan, s.time_hours))
    kept: Frontier = []
    min_time_seen = float("inf")
    for state in ordered:
        if state.time_hours < min_time_seen:
            kept.append(state)
            min_time_seen = state.time_hours
    return kept


def prune_frontier(candidates: Frontier, bucket_size: Optional[int] = BUCKET_SIZE) -> Frontier:
    """
    Sort, Pareto-filter and bucket a candidate list.

    Scanning in zhenyuan-descending order, a candidate is efficient when its
    time is below every kept candidate's. An efficient candidate is kept only
    if no kept state shares its bucket ``zhenyuan // bucket_size``; a dropped
    candidate does not lower the time bar. ``bucket_size`` of 0 or None keeps
    the exact Pareto set.
    """
    if not bucket_size or bucket_size <= 0:
        return pareto_filter(candidates)

    ordered = sorted(candidates, key=lambda s: -s.zhenyuan)
    kept: Frontier = []
    min_time_seen = float("inf")
    seen_buckets = set()
    for state in ordered:
        if state.time_hours >= min_time_seen:
            continue
        bucket = state.zhenyuan // bucket_size
        if bucket in seen_buckets:
            continue
        kept.append(state)
        min_time_seen = state.time_hours
        seen_buckets.add(bucket)
    return kept


def build_frontier(
    curves: Sequence[Sequence[LevelOption]],
    bucket_size: Optional[int] = BUCKET_SIZE,
    logger: Optional[PlannerLogger] = None,
    instance_ids: Optional[Sequence[str]] = None,
) -> Frontier:
    """
    Build the final frontier over all instances.

    Parameters
    ----------
    curves : sequence of option lists
        One option curve per instance, in processing order
    bucket_size : int, optional
        Zhenyuan bucket width; 0 or None disables bucketing
    logger : PlannerLogger, optional
        Receives per-step sizes at DEBUG level
    instance_ids : sequence of str, optional
        Labels for the log lines, aligned with ``curves``

    Returns
    -------
    list of FrontierState
        Sorted by zhenyuan descending, time strictly decreasing
    """
    start_time = time.perf_counter()
    frontier = initial_frontier(curves)

    for i, options in enumerate(curves):
        candidates = expand_frontier(frontier, i, options)
        frontier = prune_frontier(candidates, bucket_size)
        if logger is not None and logger.enabled(LogLevel.DEBUG):
            label = instance_ids[i] if instance_ids else str(i)
            logger.log_merge_step(i, label, len(candidates),
                                  len(pareto_filter(candidates)), len(frontier))

    if logger is not None:
        logger.log_frontier_complete(len(frontier), (time.perf_counter() - start_time) * 1000)
        logger.log_frontier_states(frontier)
    return frontier
