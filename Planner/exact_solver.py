"""Exact plan search as a 0/1 integer program solved with PuLP/CBC."""
from __future__ import annotations

import time
from typing import List, Optional, Sequence, Tuple

import pulp  # type: ignore

from .art_data import LevelOption
from .config import ObjectiveMode
from .frontier import FrontierState
from .solver_logging import LogLevel, PlannerLogger

# Slack on the time bound when fixing the primary optimum in phase two
TIME_TOLERANCE = 1e-6


def _state_from_selection(
    curves: Sequence[Sequence[LevelOption]],
    selection: Sequence[int],
) -> FrontierState:
    """Build a FrontierState from one chosen option index per instance."""
    zhenyuan = 0
    hours = 0.0
    levels: List[int] = []
    for options, idx in zip(curves, selection):
        opt = options[idx]
        zhenyuan += opt.zhenyuan - options[0].zhenyuan
        hours += opt.time_hours
        levels.append(opt.level)
    return FrontierState(zhenyuan=zhenyuan, time_hours=hours, choices=tuple(levels))


def build_model(curves: Sequence[Sequence[LevelOption]], sense: int):
    """
    Build a model selecting exactly one option per instance.

    Returns (problem, x_vars, zhenyuan_expr, time_expr) where the zhenyuan
    expression is the delta over the all-minimum baseline.
    """
    prob = pulp.LpProblem("CultivationPlan", sense)
    x_vars: List[List[pulp.LpVariable]] = []

    for i, options in enumerate(curves):
        xi = [pulp.LpVariable(f"x_{i}_{k}", cat=pulp.LpBinary) for k in range(len(options))]
        prob += pulp.lpSum(xi) == 1, f"OneLevel_{i}"
        x_vars.append(xi)

    zhenyuan_expr = pulp.lpSum(
        (opt.zhenyuan - options[0].zhenyuan) * x_vars[i][k]
        for i, options in enumerate(curves)
        for k, opt in enumerate(options)
    )
    time_expr = pulp.lpSum(
        opt.time_hours * x_vars[i][k]
        for i, options in enumerate(curves)
        for k, opt in enumerate(options)
    )
    return prob, x_vars, zhenyuan_expr, time_expr


def _solve(prob: pulp.LpProblem, x_vars, verbose: bool) -> Optional[List[int]]:
    prob.solve(pulp.PULP_CBC_CMD(msg=verbose))
    if pulp.LpStatus[prob.status] != "Optimal":
        return None
    selection: List[int] = []
    for xi in x_vars:
        values = [pulp.value(x) or 0.0 for x in xi]
        selection.append(max(range(len(values)), key=lambda k: values[k]))
    return selection


def solve_exact(
    curves: Sequence[Sequence[LevelOption]],
    mode: ObjectiveMode,
    target_value: float,
    baseline: int,
    logger: Optional[PlannerLogger] = None,
) -> Tuple[FrontierState, bool]:
    """
    Find the optimal plan for the objective with a MILP.

    Time mode maximises zhenyuan subject to total time <= target, then
    minimises time at that zhenyuan. Zhenyuan mode minimises time subject to
    total zhenyuan >= target, then maximises zhenyuan at that time. When the
    target cannot be met the best-effort plan is returned: every instance at
    its minimum level (time mode) or its maximum level (zhenyuan mode).

    Returns
    -------
    (FrontierState, bool)
        The chosen plan and whether it meets the target
    """
    start_time = time.perf_counter()
    verbose = logger is not None and logger.level >= LogLevel.TRACE

    if mode == ObjectiveMode.TIME:
        prob, x, z_expr, t_expr = build_model(curves, pulp.LpMaximize)
        prob += z_expr, "TotalZhenyuan"
        prob += t_expr <= target_value, "TimeBudget"
        selection = _solve(prob, x, verbose)
        if selection is not None:
            best_z = _state_from_selection(curves, selection).zhenyuan
            prob, x, z_expr, t_expr = build_model(curves, pulp.LpMinimize)
            prob += t_expr, "TotalTime"
            prob += t_expr <= target_value, "TimeBudget"
            prob += z_expr >= best_z, "KeepZhenyuan"
            selection = _solve(prob, x, verbose) or selection
        fallback = [0] * len(curves)
    else:
        required = target_value - baseline
        prob, x, z_expr, t_expr = build_model(curves, pulp.LpMinimize)
        prob += t_expr, "TotalTime"
        prob += z_expr >= required, "ZhenyuanFloor"
        selection = _solve(prob, x, verbose)
        if selection is not None:
            best_t = _state_from_selection(curves, selection).time_hours
            prob, x, z_expr, t_expr = build_model(curves, pulp.LpMaximize)
            prob += z_expr, "TotalZhenyuan"
            prob += z_expr >= required, "ZhenyuanFloor"
            prob += t_expr <= best_t + TIME_TOLERANCE, "KeepTime"
            selection = _solve(prob, x, verbose) or selection
        fallback = [len(options) - 1 for options in curves]

    target_met = selection is not None
    state = _state_from_selection(curves, selection if target_met else fallback)

    if logger is not None:
        logger.log(LogLevel.SUMMARY, "MILP",
                   f"MILP solved {len(curves)} instances in "
                   f"{(time.perf_counter() - start_time) * 1000:.1f}ms "
                   f"({'optimal' if target_met else 'infeasible, best effort'})")
    return state, target_met
