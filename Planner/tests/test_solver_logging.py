"""Tests for the planner logger and its use during optimization."""
from __future__ import annotations

from io import StringIO

from Planner import optimize
from Planner.config import ArtSpec, ObjectiveMode, PlannerSettings
from Planner.solver_logging import LogLevel, create_logger, create_string_logger

SETTINGS = PlannerSettings(speed=5000, target_type=ObjectiveMode.ZHENYUAN, target_value=15000)
ARTS = [ArtSpec(id="sword", difficulty=12), ArtSpec(id="body", difficulty=8, is_main=False, count=2)]


class TestLogger:

    def test_entries_above_level_are_dropped(self):
        logger, buffer = create_string_logger(LogLevel.SUMMARY)
        logger.log(LogLevel.SUMMARY, "TEST", "kept")
        logger.log(LogLevel.DEBUG, "TEST", "dropped")
        assert [e.message for e in logger.entries] == ["kept"]
        assert "dropped" not in buffer.getvalue()

    def test_table_output(self):
        logger, buffer = create_string_logger(LogLevel.DETAILED)
        logger.log_table(LogLevel.DETAILED, "TEST", ["A", "Long header"], [[1, 2], [333, 4]], title="T")
        text = buffer.getvalue()
        assert "A   | Long header" in text
        assert "333 | 4" in text

    def test_create_logger_accepts_names_and_ints(self):
        assert create_logger("debug").level == LogLevel.DEBUG
        assert create_logger(20).level == LogLevel.SUMMARY

    def test_log_file(self, tmp_path):
        path = tmp_path / "planner.log"
        with create_logger(LogLevel.MINIMAL, output=StringIO(), log_file=path) as file_logger:
            file_logger.log(LogLevel.MINIMAL, "TEST", "to file")
        assert "to file" in path.read_text(encoding="utf-8")


class TestOptimizeLogging:

    def test_silent_by_default(self, capsys):
        optimize(ARTS, SETTINGS)
        assert capsys.readouterr().out == ""

    def test_detailed_run(self):
        logger, buffer = create_string_logger(LogLevel.DETAILED)
        result = optimize(ARTS, SETTINGS, logger=logger)
        categories = {e.category for e in logger.entries}
        assert {"SOLVER", "CONFIG", "INSTANCES", "CURVES", "FRONTIER", "SELECTION", "PLAN"} <= categories
        assert f"Zhenyuan: {result.total_zhenyuan}" in buffer.getvalue()
        assert "Chosen Levels" in buffer.getvalue()

    def test_trace_lists_frontier(self):
        logger, buffer = create_string_logger(LogLevel.TRACE)
        result = optimize(ARTS, SETTINGS, logger=logger)
        assert "Final Frontier" in buffer.getvalue()
        steps = [e for e in logger.get_entries_by_category("FRONTIER") if e.message.startswith("Step")]
        assert len(steps) == len(result.levels)

    def test_minimal_only_results(self):
        logger, _ = create_string_logger(LogLevel.MINIMAL)
        optimize(ARTS, SETTINGS, logger=logger)
        assert {e.level for e in logger.entries} == {LogLevel.MINIMAL}
