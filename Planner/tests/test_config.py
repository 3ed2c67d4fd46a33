"""Tests for loading, normalising and saving the planner YAML config."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from Planner.config import (
    DEFAULT_CONFIG_PATH,
    ArtSpec,
    ObjectiveMode,
    PlannerConfig,
    PlannerSettings,
    SearchOptions,
    load_config,
    parse_config,
    save_config,
)


def _write(tmp_path, data) -> Path:
    path = tmp_path / "planner.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_default_file_loads(self):
        assert DEFAULT_CONFIG_PATH.exists()
        config = load_config()
        assert config.arts
        assert config.settings.speed > 0
        assert config.search.engine == "frontier"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == PlannerConfig()

    def test_full_file(self, tmp_path):
        path = _write(tmp_path, {
            "settings": {
                "speed": 2500,
                "breakthroughReduction": 30,
                "targetType": "time",
                "targetValue": 72,
            },
            "search": {"minLevel": 99, "maxLevel": 299, "bucketSize": 50, "engine": "milp"},
            "arts": [
                {"id": "sword", "name": "Sword", "difficulty": 12, "isMain": True, "count": 1},
                {"id": "body", "difficulty": 8, "isMain": "secondary", "count": 2},
            ],
        })
        config = load_config(path)
        assert config.settings == PlannerSettings(
            speed=2500.0, breakthrough_reduction=30.0,
            target_type=ObjectiveMode.TIME, target_value=72.0,
        )
        assert config.search == SearchOptions(min_level=99, max_level=299, bucket_size=50, engine="milp")
        assert config.arts == [
            ArtSpec(id="sword", difficulty=12.0, is_main=True, count=1, name="Sword"),
            ArtSpec(id="body", difficulty=8.0, is_main=False, count=2),
        ]

    def test_yaml_syntax_error_is_value_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("settings: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid YAML"):
            load_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == PlannerConfig()


class TestNormalisation:

    def test_reduction_clamped(self):
        assert parse_config({"settings": {"breakthroughReduction": 150}}).settings.breakthrough_reduction == 100.0
        assert parse_config({"settings": {"breakthroughReduction": -5}}).settings.breakthrough_reduction == 0.0

    def test_negative_count_clamped(self):
        config = parse_config({"arts": [{"id": "a", "difficulty": 1, "count": -3}]})
        assert config.arts[0].count == 0

    def test_unknown_target_type_means_zhenyuan(self):
        assert parse_config({"settings": {"targetType": "xp"}}).settings.target_type == ObjectiveMode.ZHENYUAN

    def test_target_type_case_insensitive(self):
        assert parse_config({"settings": {"targetType": "TIME"}}).settings.target_type == ObjectiveMode.TIME

    @pytest.mark.parametrize("raw", [
        {"settings": {"speed": 0}},
        {"settings": {"speed": -10}},
        {"search": {"minLevel": 199, "maxLevel": 99}},
        {"search": {"minLevel": 100}},
        {"search": {"minLevel": 9}},
        {"search": {"minLevel": 89}},
        {"settings": [1, 2]},
        {"arts": {"id": "a"}},
        {"arts": ["sword"]},
        ["sword"],
        {"search": {"engine": "greedy"}},
        {"arts": [{"difficulty": 3}]},
        {"arts": [{"id": "a", "difficulty": 0}]},
    ])
    def test_unusable_values_rejected(self, raw):
        with pytest.raises(ValueError):
            parse_config(raw)

    def test_min_level_on_breakthrough_lattice(self):
        assert parse_config({"search": {"minLevel": 199}}).search.min_level == 199


class TestSaveConfig:

    def test_round_trip(self, tmp_path):
        config = PlannerConfig(
            arts=[
                ArtSpec(id="sword", difficulty=12.0, is_main=True, count=1, name="Azure Sword"),
                ArtSpec(id="body", difficulty=8.0, is_main=False, count=2),
            ],
            settings=PlannerSettings(speed=4000.0, breakthrough_reduction=10.0,
                                     target_type=ObjectiveMode.TIME, target_value=48.0),
            search=SearchOptions(bucket_size=0, engine="frontier"),
        )
        path = tmp_path / "saved.yaml"
        save_config(config, path)
        assert load_config(path) == config

    def test_camel_case_keys(self, tmp_path):
        path = tmp_path / "saved.yaml"
        save_config(PlannerConfig(arts=[ArtSpec(id="a", difficulty=1.0)]), path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["settings"]["targetType"] == "zhenyuan"
        assert raw["arts"][0]["isMain"] is True
        assert "name" not in raw["arts"][0]
