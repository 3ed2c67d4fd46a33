"""Resource path utilities for files shipped inside the package."""
from __future__ import annotations

from pathlib import Path


def get_resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource relative to the project root.

    Parameters
    ----------
    relative_path : str
        Path relative to project root (e.g., "Planner/DefaultPlannerConfig.yaml")

    Returns
    -------
    Path
        Absolute path to the resource
    """
    # This file is in Planner/, so parent.parent is the project root
    return Path(__file__).resolve().parent.parent / relative_path
