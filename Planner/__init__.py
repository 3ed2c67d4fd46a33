"""Planner package for cultivation art level planning."""
from .config import (
    ArtSpec,
    ObjectiveMode,
    PlannerConfig,
    PlannerSettings,
    SearchOptions,
    load_config,
    save_config,
)
from .art_data import ArtInstance, LevelOption, build_option_curve, expand_instances
from .frontier import FrontierState, build_frontier
from .planner import PlanResult, optimize, optimize_config, select_best_state
from .solver_logging import LogLevel, PlannerLogger, create_logger, create_string_logger

__all__ = [
    "ArtSpec",
    "ObjectiveMode",
    "PlannerConfig",
    "PlannerSettings",
    "SearchOptions",
    "load_config",
    "save_config",
    "ArtInstance",
    "LevelOption",
    "build_option_curve",
    "expand_instances",
    "FrontierState",
    "build_frontier",
    "PlanResult",
    "optimize",
    "optimize_config",
    "select_best_state",
    "LogLevel",
    "PlannerLogger",
    "create_logger",
    "create_string_logger",
]
