"""Tests for instance expansion and option curve precomputation."""
from __future__ import annotations

import pytest

from Planner.art_data import (
    ArtInstance,
    baseline_zhenyuan,
    build_option_curve,
    build_option_curves,
    expand_instances,
    level_grid,
)
from Planner.config import ArtSpec
from Planner.formulas import step_cost, zhenyuan_at


@pytest.fixture
def main_instance() -> ArtInstance:
    return expand_instances([ArtSpec(id="sword", difficulty=10, is_main=True)])[0]


class TestExpandInstances:

    def test_one_instance_per_copy(self):
        arts = [
            ArtSpec(id="sword", difficulty=10, is_main=True, count=1),
            ArtSpec(id="body", difficulty=4, is_main=False, count=3, name="Iron Body"),
        ]
        instances = expand_instances(arts)
        assert [i.unique_id for i in instances] == ["sword_0", "body_0", "body_1", "body_2"]

    def test_copies_keep_difficulty_and_role(self):
        instances = expand_instances([ArtSpec(id="body", difficulty=4, is_main=False, count=2)])
        assert all(i.difficulty == 4 and not i.is_main for i in instances)
        assert all(i.art_id == "body" for i in instances)

    def test_name_falls_back_to_id(self):
        instances = expand_instances([ArtSpec(id="step", difficulty=2)])
        assert instances[0].name == "step"

    def test_empty_and_zero_counts(self):
        assert expand_instances([]) == []
        assert expand_instances([ArtSpec(id="a", difficulty=1, count=0)]) == []


class TestOptionCurve:

    def test_default_grid(self):
        grid = level_grid()
        assert grid[0] == 99
        assert grid[-1] == 499
        assert len(grid) == 41

    def test_baseline_option(self, main_instance):
        options = build_option_curve(main_instance, speed=1000, breakthrough_reduction=0)
        first = options[0]
        assert first.level == 99
        assert first.time_hours == 0.0
        assert first.zhenyuan == zhenyuan_at(99, 10, True)

    def test_first_step_cost(self, main_instance):
        options = build_option_curve(main_instance, speed=1000, breakthrough_reduction=20)
        assert options[1].level == 109
        assert options[1].time_hours == pytest.approx(step_cost(99, 10, 1000, 20))

    def test_costs_are_cumulative(self, main_instance):
        options = build_option_curve(main_instance, speed=500, breakthrough_reduction=0)
        expected = step_cost(99, 10, 500, 0) + step_cost(109, 10, 500, 0) + step_cost(119, 10, 500, 0)
        assert options[3].time_hours == pytest.approx(expected)

    def test_strictly_increasing(self, main_instance):
        options = build_option_curve(main_instance, speed=1000, breakthrough_reduction=0)
        for prev, cur in zip(options, options[1:]):
            assert cur.level == prev.level + 10
            assert cur.zhenyuan > prev.zhenyuan
            assert cur.time_hours > prev.time_hours

    def test_custom_level_range(self, main_instance):
        options = build_option_curve(main_instance, 1000, 0, min_level=199, max_level=239)
        assert [o.level for o in options] == [199, 209, 219, 229, 239]
        assert options[0].time_hours == 0.0

    def test_curves_align_with_instances(self):
        instances = expand_instances([
            ArtSpec(id="a", difficulty=3, count=2),
            ArtSpec(id="b", difficulty=5, is_main=False),
        ])
        curves = build_option_curves(instances, 1000, 0)
        assert len(curves) == 3
        assert curves[0] == curves[1]
        assert baseline_zhenyuan(curves) == (
            2 * zhenyuan_at(99, 3, True) + zhenyuan_at(99, 5, False)
        )
