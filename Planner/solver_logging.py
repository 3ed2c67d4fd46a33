"""
Structured logging for the cultivation planner.

Provides insight into planner behavior at multiple verbosity levels:
    - MINIMAL: Only final results and errors
    - SUMMARY: Configuration overview and key metrics
    - DETAILED: Option curve tables, frontier sizes per art
    - DEBUG: Per-merge-step candidate counts and selection scan
    - TRACE: Everything including every frontier state

Usage:
    from Planner.solver_logging import PlannerLogger, LogLevel

    logger = PlannerLogger(level=LogLevel.DETAILED)
    logger.log_config_start(settings, search, num_arts)
    # ... pass to optimize()
    logger.log_plan_summary(result)
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Tuple, Union

from .config import PlannerSettings, SearchOptions


class LogLevel(IntEnum):
    """Verbosity levels for planner logging."""
    SILENT = 0      # No output at all
    MINIMAL = 10    # Only final results and errors
    SUMMARY = 20    # Configuration overview and key metrics
    DETAILED = 30   # Curve tables, per-art frontier sizes
    DEBUG = 40      # Merge step internals
    TRACE = 50      # Every frontier state


@dataclass
class LogEntry:
    """A single log entry with metadata."""
    timestamp: datetime
    level: LogLevel
    category: str
    message: str
    data: Optional[Dict[str, Any]] = None

    def format(self, include_timestamp: bool = True, include_level: bool = True) -> str:
        """Format the log entry as a string."""
        parts = []
        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S.%f')[:-3]}]")
        if include_level:
            parts.append(f"[{self.level.name:8}]")
        parts.append(f"[{self.category}]")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class PlannerLogger:
    """
    Structured logger for the planner.

    Collects log entries at various verbosity levels and can output
    to multiple destinations (console, file, string buffer).

    Attributes
    ----------
    level : LogLevel
        Minimum level to log (entries below this level are ignored)
    output : TextIO | None
        Output stream (defaults to sys.stdout)
    log_to_file : Path | None
        Optional path to also write logs to a file
    entries : list[LogEntry]
        All logged entries (for programmatic access)
    """
    level: LogLevel = LogLevel.SUMMARY
    output: Optional[TextIO] = None
    log_to_file: Optional[Path] = None
    include_timestamp: bool = True
    include_level: bool = True
    entries: List[LogEntry] = field(default_factory=list)
    _file_handle: Optional[TextIO] = field(default=None, repr=False)

    def __post_init__(self):
        if self.output is None:
            self.output = sys.stdout
        if self.log_to_file:
            self._file_handle = open(self.log_to_file, "w", encoding="utf-8")

    def close(self):
        """Close the file handle if opened."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def enabled(self, level: LogLevel) -> bool:
        return level <= self.level

    def log(self, level: LogLevel, category: str, message: str,
            data: Optional[Dict[str, Any]] = None) -> None:
        """Record and output a log entry."""
        if level > self.level:
            return

        entry = LogEntry(
            timestamp=datetime.now(),
            level=level,
            category=category,
            message=message,
            data=data,
        )
        self.entries.append(entry)

        formatted = entry.format(self.include_timestamp, self.include_level)
        if self.output:
            self.output.write(formatted + "\n")
            self.output.flush()
        if self._file_handle:
            self._file_handle.write(formatted + "\n")
            self._file_handle.flush()

    def log_table(self, level: LogLevel, category: str,
                  headers: List[str], rows: List[List[Any]],
                  title: Optional[str] = None) -> None:
        """Log a formatted table."""
        if level > self.level:
            return

        all_rows = [headers] + rows
        widths = [max(len(str(row[i])) for row in all_rows) for i in range(len(headers))]

        lines = []
        if title:
            lines.append(title)
            lines.append("=" * len(title))

        header_line = " | ".join(str(h).ljust(w) for h, w in zip(headers, widths))
        lines.append(header_line)
        lines.append("-" * len(header_line))

        for row in rows:
            row_line = " | ".join(str(v).ljust(w) for v, w in zip(row, widths))
            lines.append(row_line)

        for line in lines:
            self.log(level, category, line)

    # -------------------------------------------------------------------------
    # Configuration Logging
    # -------------------------------------------------------------------------

    def log_config_start(self, settings: PlannerSettings, search: SearchOptions,
                         num_arts: int) -> None:
        """Log the start of an optimization with a settings summary."""
        self.log(LogLevel.MINIMAL, "SOLVER",
                 f"Starting {search.engine} plan for {num_arts} arts")

        if self.level >= LogLevel.SUMMARY:
            self.log(LogLevel.SUMMARY, "CONFIG",
                     f"Objective: {settings.target_type.value}, "
                     f"target={settings.target_value:g}")
            self.log(LogLevel.SUMMARY, "CONFIG",
                     f"Speed: {settings.speed:g}/h, "
                     f"breakthrough reduction: {settings.breakthrough_reduction:g}%")
            self.log(LogLevel.SUMMARY, "CONFIG",
                     f"Levels {search.min_level}-{search.max_level}, "
                     f"bucket size: {search.bucket_size}")

    # -------------------------------------------------------------------------
    # Instance / Curve Logging
    # -------------------------------------------------------------------------

    def log_instances_expanded(self, num_arts: int, instances: Sequence[Any]) -> None:
        """Log instance expansion."""
        self.log(LogLevel.SUMMARY, "INSTANCES",
                 f"Expanded {num_arts} arts into {len(instances)} instances")
        if self.level >= LogLevel.DEBUG:
            for inst in instances:
                role = "main" if inst.is_main else "secondary"
                self.log(LogLevel.DEBUG, "INSTANCES",
                         f"  {inst.unique_id}: difficulty={inst.difficulty:g}, {role}")

    def log_curves(self, instances: Sequence[Any], curves: Sequence[Sequence[Any]]) -> None:
        """Log one row per instance: option count and the extremes of its curve."""
        if self.level < LogLevel.DETAILED:
            return

        rows = []
        for inst, options in zip(instances, curves):
            first, last = options[0], options[-1]
            rows.append([
                inst.unique_id,
                len(options),
                f"{first.level}-{last.level}",
                first.zhenyuan,
                last.zhenyuan,
                f"{last.time_hours:.1f}h",
            ])

        self.log_table(LogLevel.DETAILED, "CURVES",
                       ["Instance", "Options", "Levels", "Base Z", "Max Z", "Max Time"],
                       rows, title="Option Curves")

    def log_baseline(self, baseline_zhenyuan: int) -> None:
        self.log(LogLevel.DETAILED, "CURVES",
                 f"Baseline zhenyuan (all arts at minimum level): {baseline_zhenyuan}")

    # -------------------------------------------------------------------------
    # Frontier Logging
    # -------------------------------------------------------------------------

    def log_merge_step(self, index: int, unique_id: str, candidates: int,
                       pareto: int, kept: int) -> None:
        """Log candidate, Pareto and bucketed counts for one merge step."""
        self.log(LogLevel.DEBUG, "FRONTIER",
                 f"Step {index} ({unique_id}): {candidates} candidates, "
                 f"{pareto} Pareto-efficient, {kept} kept")

    def log_frontier_states(self, frontier: Sequence[Any]) -> None:
        """Log every state of a frontier (TRACE level)."""
        if self.level < LogLevel.TRACE:
            return

        rows = [[i, state.zhenyuan, f"{state.time_hours:.2f}", " ".join(map(str, state.choices))]
                for i, state in enumerate(frontier)]
        self.log_table(LogLevel.TRACE, "FRONTIER",
                       ["#", "Delta Z", "Time", "Levels"],
                       rows, title="Final Frontier")

    def log_frontier_complete(self, size: int, elapsed_ms: float) -> None:
        self.log(LogLevel.SUMMARY, "FRONTIER",
                 f"Frontier complete: {size} states in {elapsed_ms:.1f}ms")

    # -------------------------------------------------------------------------
    # Selection / Plan Logging
    # -------------------------------------------------------------------------

    def log_selection(self, mode: str, target_value: float, target_met: bool,
                      zhenyuan: int, time_hours: float) -> None:
        """Log the outcome of the target scan."""
        outcome = "met" if target_met else "not reachable, best effort"
        self.log(LogLevel.DETAILED, "SELECTION",
                 f"{mode} target {target_value:g} {outcome}: "
                 f"zhenyuan={zhenyuan}, time={time_hours:.2f}h")

    def log_plan_summary(self, result: Any) -> None:
        """Log plan totals and, at DETAILED level, the chosen level per instance."""
        self.log(LogLevel.MINIMAL, "PLAN",
                 f"Status: {result.status}, Zhenyuan: {result.total_zhenyuan}, "
                 f"Time: {result.total_time_hours:.2f}h")

        if self.level >= LogLevel.DETAILED and result.levels:
            rows = [[uid, lvl] for uid, lvl in result.levels.items()]
            self.log_table(LogLevel.DETAILED, "PLAN",
                           ["Instance", "Level"], rows, title="Chosen Levels")

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def get_entries_by_category(self, category: str) -> List[LogEntry]:
        """Return entries matching a category."""
        return [e for e in self.entries if e.category == category]


def create_logger(
    level: Union[LogLevel, str, int] = LogLevel.SUMMARY,
    output: Optional[TextIO] = None,
    log_file: Optional[Path] = None,
) -> PlannerLogger:
    """
    Factory function to create a PlannerLogger.

    Parameters
    ----------
    level : LogLevel | str | int
        Verbosity level. Can be LogLevel enum, string name, or integer.
    output : TextIO | None
        Output stream. Defaults to sys.stdout.
    log_file : Path | None
        Optional path to write logs to file.

    Returns
    -------
    PlannerLogger
        Configured logger instance
    """
    if isinstance(level, str):
        level = LogLevel[level.upper()]
    elif isinstance(level, int) and not isinstance(level, LogLevel):
        level = LogLevel(level)

    return PlannerLogger(
        level=level,
        output=output,
        log_to_file=log_file,
    )


def create_string_logger(level: LogLevel = LogLevel.DETAILED) -> Tuple[PlannerLogger, StringIO]:
    """
    Create a logger that writes to a string buffer.

    Useful for testing or capturing logs programmatically.

    Returns
    -------
    tuple[PlannerLogger, StringIO]
        The logger and the buffer it writes to
    """
    buffer = StringIO()
    logger = PlannerLogger(level=level, output=buffer)
    return logger, buffer
