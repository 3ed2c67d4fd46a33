"""Choose a checkpoint level per art instance to meet a zhenyuan or time target."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .art_data import (
    ArtInstance,
    LevelOption,
    baseline_zhenyuan,
    build_option_curves,
    expand_instances,
)
from .config import ArtSpec, ObjectiveMode, PlannerConfig, PlannerSettings, SearchOptions
from .exact_solver import solve_exact
from .frontier import Frontier, FrontierState, build_frontier
from .solver_logging import LogLevel, PlannerLogger, create_logger

STATUS_TARGET_MET = "Target met"
STATUS_BEST_EFFORT = "Best effort"
STATUS_NO_ARTS = "No arts"


@dataclass
class PlanResult:
    status: str
    total_zhenyuan: int
    total_time_hours: float
    levels: Dict[str, int]  # instance unique id -> chosen level
    target_met: bool
    engine: str = "frontier"
    frontier_size: int = 0
    baseline_zhenyuan: int = 0
    instances: List[ArtInstance] = field(default_factory=list)
    curves: List[List[LevelOption]] = field(default_factory=list, repr=False)


def _target_met_by(mode: ObjectiveMode, target_value: float,
                   total_zhenyuan: float, total_time: float) -> bool:
    if mode == ObjectiveMode.TIME:
        return total_time <= target_value
    return total_zhenyuan >= target_value


def select_best_state(
    frontier: Frontier,
    mode: ObjectiveMode,
    target_value: float,
    baseline: int,
) -> Tuple[Optional[FrontierState], bool]:
    """
    Pick the frontier state matching the objective.

    The frontier is sorted by zhenyuan descending, so time decreases along it.

    Zhenyuan mode: the last state still reaching the target is the fastest
    one; the scan stops at the first state below target. Falls back to the
    highest-zhenyuan state.

    Time mode: the first state within the time budget has the most zhenyuan.
    Falls back to the fastest state.

    Returns
    -------
    (FrontierState | None, bool)
        Chosen state (None only for an empty frontier) and whether it meets
        the target
    """
    if not frontier:
        return None, False

    if mode == ObjectiveMode.ZHENYUAN:
        best: Optional[FrontierState] = None
        for state in frontier:
            if state.zhenyuan + baseline >= target_value:
                best = state
            else:
                break
        if best is None:
            return frontier[0], False
        return best, True

    for state in frontier:
        if state.time_hours <= target_value:
            return state, True
    return frontier[-1], False


def optimize(
    arts: Sequence[ArtSpec],
    settings: PlannerSettings,
    search: Optional[SearchOptions] = None,
    logger: Optional[PlannerLogger] = None,
    log_level: Union[LogLevel, str, int, None] = None,
    verbose: bool = False,
) -> Optional[PlanResult]:
    """
    Plan the level of every art instance for the configured objective.

    Inputs are assumed sanitised (see ``config.load_config``): positive speed
    and difficulties, reduction within 0-100, non-negative counts. Nothing
    here validates them.

    Parameters
    ----------
    arts : sequence of ArtSpec
        Arts to plan; each contributes ``count`` independent instances
    settings : PlannerSettings
        Speed, breakthrough reduction, objective mode and target
    search : SearchOptions, optional
        Level range, bucket size and engine. Defaults to SearchOptions()
    logger : PlannerLogger, optional
        Pre-configured logger. If None, one is created based on log_level.
    log_level : LogLevel | str | int, optional
        Logging verbosity. Only used if logger is None.
    verbose : bool
        Shortcut for SUMMARY logging when neither logger nor log_level is given

    Returns
    -------
    PlanResult | None
        The plan; None only if no frontier state exists at all
    """
    start_time = time.perf_counter()
    search = search or SearchOptions()

    if logger is None:
        if log_level is not None:
            logger = create_logger(level=log_level)
        elif verbose:
            logger = create_logger(level=LogLevel.SUMMARY)
        else:
            logger = create_logger(level=LogLevel.SILENT)

    if search.engine not in ("frontier", "milp"):
        raise ValueError(f"Unknown engine '{search.engine}'")

    mode = settings.target_type
    logger.log_config_start(settings, search, len(arts))

    instances = expand_instances(arts)
    logger.log_instances_expanded(len(arts), instances)

    if not instances:
        logger.log(LogLevel.MINIMAL, "SOLVER", "No art instances - returning empty plan")
        return PlanResult(
            status=STATUS_NO_ARTS,
            total_zhenyuan=0,
            total_time_hours=0.0,
            levels={},
            target_met=_target_met_by(mode, settings.target_value, 0, 0.0),
            engine=search.engine,
        )

    curves = build_option_curves(
        instances,
        settings.speed,
        settings.breakthrough_reduction,
        search.min_level,
        search.max_level,
    )
    baseline = baseline_zhenyuan(curves)
    logger.log_curves(instances, curves)
    logger.log_baseline(baseline)

    if search.engine == "milp":
        best, target_met = solve_exact(curves, mode, settings.target_value, baseline, logger)
        frontier_size = 0
    else:
        frontier = build_frontier(
            curves,
            bucket_size=search.bucket_size,
            logger=logger,
            instance_ids=[inst.unique_id for inst in instances],
        )
        frontier_size = len(frontier)
        best, target_met = select_best_state(frontier, mode, settings.target_value, baseline)

    if best is None:
        logger.log(LogLevel.MINIMAL, "SOLVER", "Empty frontier - no plan")
        return None

    logger.log_selection(mode.value, settings.target_value, target_met,
                         best.zhenyuan + baseline, best.time_hours)

    result = PlanResult(
        status=STATUS_TARGET_MET if target_met else STATUS_BEST_EFFORT,
        total_zhenyuan=best.zhenyuan + baseline,
        total_time_hours=best.time_hours,
        levels={inst.unique_id: level for inst, level in zip(instances, best.choices)},
        target_met=target_met,
        engine=search.engine,
        frontier_size=frontier_size,
        baseline_zhenyuan=baseline,
        instances=instances,
        curves=curves,
    )
    logger.log_plan_summary(result)
    logger.log(LogLevel.MINIMAL, "SOLVER",
               f"Plan completed in {(time.perf_counter() - start_time) * 1000:.1f}ms")
    return result


def optimize_config(
    config: PlannerConfig,
    logger: Optional[PlannerLogger] = None,
    log_level: Union[LogLevel, str, int, None] = None,
    verbose: bool = False,
) -> Optional[PlanResult]:
    """Run ``optimize`` with the arts, settings and search options of a PlannerConfig."""
    return optimize(
        config.arts,
        config.settings,
        config.search,
        logger=logger,
        log_level=log_level,
        verbose=verbose,
    )
