"""Load, normalise, and save planner configuration from DefaultPlannerConfig.yaml."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .formulas import LEVEL_STEP
from .resources import get_resource_path

DEFAULT_CONFIG_PATH = get_resource_path("Planner/DefaultPlannerConfig.yaml")

# Level grid bounds (every art starts at the first breakthrough level)
MIN_LEVEL = 99
MAX_LEVEL = 499

# Width of a zhenyuan bucket in the frontier merge (0 disables bucketing)
BUCKET_SIZE = 100

ENGINES = ("frontier", "milp")


class ObjectiveMode(str, Enum):
    """What the planner optimises for."""
    ZHENYUAN = "zhenyuan"  # reach targetValue zhenyuan in minimum time
    TIME = "time"          # maximise zhenyuan within targetValue hours


@dataclass(frozen=True)
class ArtSpec:
    """A cultivation art as entered by the player."""
    id: str
    difficulty: float
    is_main: bool = True
    count: int = 1  # number of independent copies of this art
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class PlannerSettings:
    speed: float = 1000.0  # cultivation value per hour
    breakthrough_reduction: float = 0.0  # percent, 0-100
    target_type: ObjectiveMode = ObjectiveMode.ZHENYUAN
    target_value: float = 0.0  # zhenyuan floor or hour budget, depending on target_type


@dataclass
class SearchOptions:
    min_level: int = MIN_LEVEL
    max_level: int = MAX_LEVEL
    bucket_size: int = BUCKET_SIZE
    engine: str = "frontier"


@dataclass
class PlannerConfig:
    arts: List[ArtSpec] = field(default_factory=list)
    settings: PlannerSettings = field(default_factory=PlannerSettings)
    search: SearchOptions = field(default_factory=SearchOptions)


def _parse_bool(raw: Any, default: bool = True) -> bool:
    """Parse YAML booleans, including 'main'/'secondary' style strings."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in ("true", "yes", "main", "primary", "1"):
            return True
        if text in ("false", "no", "secondary", "sub", "0"):
            return False
    return default


def _parse_objective(raw: Any) -> ObjectiveMode:
    """Map a target type string to ObjectiveMode (unknown values mean zhenyuan)."""
    if isinstance(raw, ObjectiveMode):
        return raw
    try:
        return ObjectiveMode(str(raw).strip().lower())
    except ValueError:
        return ObjectiveMode.ZHENYUAN


def _parse_art(block: Any, index: int) -> ArtSpec:
    if not isinstance(block, dict):
        raise ValueError(f"Art #{index} must be a mapping, got {type(block).__name__}")
    art_id = str(block.get("id", "") or "").strip()
    if not art_id:
        raise ValueError(f"Art #{index} has no id")
    difficulty = float(block.get("difficulty", 0))
    if difficulty <= 0:
        raise ValueError(f"Art '{art_id}' needs a positive difficulty, got {difficulty}")
    return ArtSpec(
        id=art_id,
        difficulty=difficulty,
        is_main=_parse_bool(block.get("isMain", True)),
        count=max(0, int(block.get("count", 1))),
        name=str(block.get("name", "") or ""),
    )


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = raw.get(key, {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(section).__name__}")
    return section


def parse_config(raw: Any) -> PlannerConfig:
    """Normalise a raw YAML mapping into PlannerConfig, raising ValueError on unusable values."""
    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a mapping, got {type(raw).__name__}")

    # Settings
    settings_raw = _section(raw, "settings")
    speed = float(settings_raw.get("speed", 1000.0))
    if speed <= 0:
        raise ValueError(f"speed must be positive, got {speed}")
    reduction = float(settings_raw.get("breakthroughReduction", 0.0))
    settings = PlannerSettings(
        speed=speed,
        breakthrough_reduction=min(100.0, max(0.0, reduction)),
        target_type=_parse_objective(settings_raw.get("targetType", "zhenyuan")),
        target_value=float(settings_raw.get("targetValue", 0.0)),
    )

    # Search options
    search_raw = _section(raw, "search")
    min_level = int(search_raw.get("minLevel", MIN_LEVEL))
    max_level = int(search_raw.get("maxLevel", MAX_LEVEL))
    # Checkpoints must sit on breakthrough levels (99, 109, ...)
    if min_level < MIN_LEVEL or (min_level - MIN_LEVEL) % LEVEL_STEP:
        raise ValueError(
            f"minLevel must be {MIN_LEVEL} plus a multiple of {LEVEL_STEP}, got {min_level}"
        )
    if max_level < min_level:
        raise ValueError(f"maxLevel ({max_level}) is below minLevel ({min_level})")
    engine = str(search_raw.get("engine", "frontier")).strip().lower()
    if engine not in ENGINES:
        raise ValueError(f"Unknown engine '{engine}', expected one of {', '.join(ENGINES)}")
    search = SearchOptions(
        min_level=min_level,
        max_level=max_level,
        bucket_size=max(0, int(search_raw.get("bucketSize", BUCKET_SIZE))),
        engine=engine,
    )

    # Arts
    arts_raw = raw.get("arts", []) or []
    if not isinstance(arts_raw, list):
        raise ValueError(f"'arts' must be a list, got {type(arts_raw).__name__}")
    arts = [_parse_art(block, i) for i, block in enumerate(arts_raw)]

    return PlannerConfig(arts=arts, settings=settings, search=search)


def load_config(path: Optional[Path] = None) -> PlannerConfig:
    """Load and normalise configuration YAML into PlannerConfig dataclass."""
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        return PlannerConfig()

    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{cfg_path} is not valid YAML: {exc}") from exc

    return parse_config(raw)


def save_config(config: PlannerConfig, path: Optional[Path] = None) -> None:
    """
    Save PlannerConfig back to YAML file.

    Parameters
    ----------
    config : PlannerConfig
        The configuration to save
    path : Path, optional
        Path to save to. Defaults to DefaultPlannerConfig.yaml
    """
    cfg_path = path or DEFAULT_CONFIG_PATH

    data: Dict[str, Any] = {}

    data["settings"] = {
        "speed": config.settings.speed,
        "breakthroughReduction": config.settings.breakthrough_reduction,
        "targetType": config.settings.target_type.value,
        "targetValue": config.settings.target_value,
    }

    data["search"] = {
        "minLevel": config.search.min_level,
        "maxLevel": config.search.max_level,
        "bucketSize": config.search.bucket_size,
        "engine": config.search.engine,
    }

    arts_data: List[Dict[str, Any]] = []
    for art in config.arts:
        block: Dict[str, Any] = {
            "id": art.id,
            "difficulty": art.difficulty,
            "isMain": art.is_main,
            "count": art.count,
        }
        if art.name:
            block["name"] = art.name
        arts_data.append(block)
    data["arts"] = arts_data

    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, allow_unicode=True, sort_keys=False)
